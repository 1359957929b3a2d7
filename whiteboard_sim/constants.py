# whiteboard_sim/constants.py
"""
Constants for the whiteboard simulator.
Includes wheel indices, default device geometry, animation defaults
and the codes of the wheel command protocol.
"""

# Wheel indices
LEFT_WHEEL = 0
RIGHT_WHEEL = 1
WHEEL_COUNT = 2

WHEEL_NAMES = {
    LEFT_WHEEL: "left",
    RIGHT_WHEEL: "right",
}

# Animation defaults
DEFAULT_TICK_PERIOD_MS = 30  # Timer period driving animations
DEFAULT_SPEED_PULSES_PER_MS = 200.0 / 1000  # 200 pulses per second

# Default device geometry, millimetres
DEFAULT_PULLEY_RADIUS = 10.0
DEFAULT_PULLEY_SEPARATION = 1000.0
DEFAULT_WHEEL_RADIUS = 10.0
# The encoders count both edges, so the Faulhaber motors read about 280
# pulses per revolution.
DEFAULT_PULSES_PER_REVOLUTION = 280
DEFAULT_START_OFFSET_X = 500.0
DEFAULT_START_OFFSET_Y = 500.0

# Wheel command protocol (firmware serial parser)
CMD_MOVE = "M"  # Move wheels with the pen lifted
CMD_DRAW = "D"  # Move wheels with the pen on the board
COMMAND_CODES = {
    CMD_MOVE: "MOVE",
    CMD_DRAW: "DRAW",
}
# Arguments are parsed into signed 16-bit integers
COMMAND_ARG_MIN = -32768
COMMAND_ARG_MAX = 32767
COMMAND_COMMENT_PREFIX = "#"
