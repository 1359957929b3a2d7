# whiteboard_sim/whiteboard.py
"""
Simulated whiteboard robot.

Ties a kinematic model, a motion scheduler and a pen trace together behind
the same operations the physical robot offers: move the wheels, lift or lower
the pen, and report whether it is still moving.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .commands import WheelCommand
from .config import WhiteboardConfig
from .kinematics import KinematicModel, Pose
from .motion_scheduler import Clock, MotionScheduler
from .timing import TimingSource

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Segment = Tuple[Point, Point]


@dataclass
class PenTrace:
    """Line segments drawn so far, in board coordinates (mm)."""

    previous_point: Optional[Point] = None
    segments: List[Segment] = field(default_factory=list)

    def move_to(self, point: Point, drawing: bool) -> None:
        if drawing and self.previous_point is not None and point != self.previous_point:
            self.segments.append((self.previous_point, point))
        self.previous_point = point

    @property
    def total_length(self) -> float:
        return sum(math.dist(start, end) for start, end in self.segments)

    def clear(self) -> None:
        self.segments.clear()


class Whiteboard:
    """
    Host for one simulated robot.

    Every state change reported by the scheduler moves the trace to the new
    pen position; while drawing, that adds a segment from the previous one.

    Attributes:
        config (WhiteboardConfig): Settings the robot was built from.
        model (KinematicModel): Wheel and string state.
        scheduler (MotionScheduler): Animates wheel commands on the model.
        timing_source (TimingSource): Tick source shared by all runs.
        trace (PenTrace): Segments drawn so far.
        drawing (bool): Whether the pen is on the board.
    """

    def __init__(
        self,
        config: Optional[WhiteboardConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config or WhiteboardConfig()
        self.model: KinematicModel = self.config.create_model()
        self.timing_source = TimingSource(self.config.tick_period_ms)
        self.scheduler = MotionScheduler(
            self.model, timing_source=self.timing_source, clock=clock
        )
        self.speed_pulses_per_ms = self.config.speed_pulses_per_ms
        self.drawing = False
        self.trace = PenTrace(previous_point=self.model.query_pose().pen_position)
        self.scheduler.add_state_listener(self._on_state_changed)
        logger.info(f"Whiteboard '{self.config.name}' ready.")

    def _on_state_changed(self) -> None:
        self.trace.move_to(self.model.query_pose().pen_position, self.drawing)

    def pose(self) -> Pose:
        return self.model.query_pose()

    def is_running(self) -> bool:
        return self.scheduler.is_running()

    def set_drawing(self, drawing: bool) -> None:
        if drawing != self.drawing:
            logger.debug(f"Pen {'down' if drawing else 'up'}.")
        self.drawing = drawing

    def move_wheels(self, pulses: Sequence[int], speed_pulses_per_ms: Optional[float] = None) -> None:
        """Start moving the wheels by ``pulses``, preempting any active move."""
        if speed_pulses_per_ms is None:
            speed_pulses_per_ms = self.speed_pulses_per_ms
        self.scheduler.command_motion(pulses, speed_pulses_per_ms)

    def execute(self, command: WheelCommand) -> None:
        """Apply a parsed wheel command: set the pen, then move."""
        self.set_drawing(command.drawing)
        self.move_wheels(command.pulses)

    async def run_commands(self, commands: Sequence[WheelCommand]) -> None:
        """
        Execute commands one after another, each to completion.

        Starts the timing source if needed; must be awaited on a running
        event loop.
        """
        self.timing_source.start()
        for command in commands:
            logger.info(f"Executing '{command}'.")
            self.execute(command)
            await self.scheduler.wait_until_idle()

    async def close(self) -> None:
        await self.timing_source.stop()
