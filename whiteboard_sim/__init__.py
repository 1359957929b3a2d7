"""
Whiteboard Robot Simulator
==========================

Kinematic model and time-stepped animation of a two-pulley string plotter:
a pen hanging from two strings whose free lengths are set by two motorised
wheels.
"""

# Import the constants module and alias it as 'const' for patterned access
from . import constants as const

from .kinematics import KinematicModel, Pose
from .motion_scheduler import MotionScheduler, MotionState
from .timing import TimingSource
from .commands import WheelCommand, parse_command, parse_script
from .config import WhiteboardConfig, load_config, save_config
from .whiteboard import PenTrace, Whiteboard

from .exceptions import (
    WhiteboardError,
    ParameterError,
    KinematicsError,
    InvalidGeometry,
    UnreachablePose,
    CommandError,
    ConfigurationError,
)

__version__ = "0.1.0"

__all__ = [
    "const",

    # Core
    "KinematicModel",
    "Pose",
    "MotionScheduler",
    "MotionState",
    "TimingSource",

    # Host
    "Whiteboard",
    "PenTrace",
    "WheelCommand",
    "parse_command",
    "parse_script",
    "WhiteboardConfig",
    "load_config",
    "save_config",

    # Exceptions
    "WhiteboardError",
    "ParameterError",
    "KinematicsError",
    "InvalidGeometry",
    "UnreachablePose",
    "CommandError",
    "ConfigurationError",
]
