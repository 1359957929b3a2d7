"""
Example: Drawing a square on the simulated whiteboard.

This script demonstrates how to drive the `Whiteboard` host directly:
1. Building a robot from a `WhiteboardConfig`.
2. Converting board coordinates to wheel pulses with `KinematicModel.pulses_to`.
3. Travelling to the first corner with the pen up.
4. Drawing each edge as a series of short strokes.
5. Printing the final pose and the drawn trace.

Equal wheel rotations do not move the pen in a straight line, so each edge is
split into short steps and every step is converted to pulses separately.

Run it with: `python examples/draw_square.py`
"""
import asyncio
import logging

from whiteboard_sim import Whiteboard, WhiteboardConfig, exceptions

# --- Configuration ---
LOG_LEVEL = logging.INFO

SQUARE_ORIGIN = (400.0, 450.0)  # Top-left corner (mm)
SQUARE_SIZE_MM = 200.0
STEP_MM = 10.0  # Length of each interpolated stroke

CONFIG = WhiteboardConfig(
    name="Square demo",
    tick_period_ms=10.0,
    speed_pulses_per_ms=2.0,
)

# --- Logging Setup ---
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("DrawSquareExample")


async def move_to(whiteboard: Whiteboard, x: float, y: float, drawing: bool):
    """Move the pen to (x, y) and wait for the run to finish."""
    whiteboard.set_drawing(drawing)
    pulses = whiteboard.model.pulses_to(x, y)
    whiteboard.move_wheels(pulses)
    await whiteboard.scheduler.wait_until_idle()


async def draw_line(whiteboard: Whiteboard, end_x: float, end_y: float):
    start_x, start_y = whiteboard.pose().pen_position
    length = ((end_x - start_x) ** 2 + (end_y - start_y) ** 2) ** 0.5
    steps = max(1, int(length / STEP_MM))
    for i in range(1, steps + 1):
        t = i / steps
        await move_to(
            whiteboard,
            start_x + (end_x - start_x) * t,
            start_y + (end_y - start_y) * t,
            drawing=True,
        )


async def main():
    whiteboard = Whiteboard(CONFIG)
    logger.info(f"Model: {whiteboard.model}")

    x0, y0 = SQUARE_ORIGIN
    corners = [
        (x0 + SQUARE_SIZE_MM, y0),
        (x0 + SQUARE_SIZE_MM, y0 + SQUARE_SIZE_MM),
        (x0, y0 + SQUARE_SIZE_MM),
        (x0, y0),
    ]

    whiteboard.timing_source.start()
    try:
        logger.info(f"Travelling to ({x0}, {y0}) with the pen up...")
        await move_to(whiteboard, x0, y0, drawing=False)
        for corner in corners:
            logger.info(f"Drawing edge to {corner}...")
            await draw_line(whiteboard, *corner)
    except exceptions.UnreachablePose as e:
        logger.error(f"Square does not fit on the board: {e}")
    finally:
        await whiteboard.close()

    pose = whiteboard.pose()
    logger.info(f"Final pen position: ({pose.x:.2f}, {pose.y:.2f}) mm")
    logger.info(
        f"Drew {len(whiteboard.trace.segments)} segments, "
        f"{whiteboard.trace.total_length:.1f} mm of ink."
    )


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Example interrupted by user.")
