# whiteboard_sim/motion_scheduler.py
"""
Time-stepped animation of wheel motion commands.

A motion command (pulses per wheel and a speed) becomes a run lasting
``max(|pulses|) / speed`` milliseconds. Every tick of the timing source maps
the elapsed time to a fraction of the run and advances the kinematic model by
the part of the run completed since the previous tick.
"""
import asyncio
import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .constants import LEFT_WHEEL, RIGHT_WHEEL, WHEEL_COUNT
from .exceptions import ParameterError
from .kinematics import KinematicModel
from .timing import TimingSource

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
RunningListener = Callable[[bool], None]
StateListener = Callable[[], None]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class MotionState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class ActiveRun:
    """Book-keeping for the motion currently being animated."""

    start_ms: float
    duration_ms: int
    distance: Tuple[float, float]  # Total rotation per wheel, radians
    previous_fraction: float = 0.0


class MotionScheduler:
    """
    Drives a :class:`KinematicModel` through one motion command at a time.

    The scheduler is either ``IDLE`` or ``RUNNING``. A new command preempts the
    running one immediately; whatever the preempted run had not yet advanced
    is dropped. Ticks come from a :class:`TimingSource` while running, or from
    direct calls to :meth:`tick` when the host owns the loop.

    Attributes:
        model (KinematicModel): The model this scheduler mutates.
        timing_source (Optional[TimingSource]): Source of ticks, if any. The
            host starts and stops it; the scheduler only subscribes while a run
            is active.
        state (MotionState): Current state of the run state machine.
        duration_ms (int): Duration of the most recently commanded motion.
    """

    def __init__(
        self,
        model: KinematicModel,
        timing_source: Optional[TimingSource] = None,
        clock: Optional[Clock] = None,
    ):
        self.model = model
        self.timing_source = timing_source
        self._clock: Clock = clock or monotonic_ms
        self.state = MotionState.IDLE
        self.duration_ms = 0
        self._run: Optional[ActiveRun] = None
        self._running_listeners: List[RunningListener] = []
        self._state_listeners: List[StateListener] = []
        self._idle_waiters: List[asyncio.Future] = []

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_running_listener(self, listener: RunningListener) -> None:
        """Call ``listener(running)`` on every Idle/Running transition."""
        self._running_listeners.append(listener)

    def remove_running_listener(self, listener: RunningListener) -> None:
        if listener in self._running_listeners:
            self._running_listeners.remove(listener)

    def add_state_listener(self, listener: StateListener) -> None:
        """Call ``listener()`` after every change to the model's state."""
        self._state_listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        if listener in self._state_listeners:
            self._state_listeners.remove(listener)

    def _notify_state_changed(self) -> None:
        for listener in list(self._state_listeners):
            listener()

    def _set_state(self, state: MotionState) -> None:
        if state is self.state:
            return
        self.state = state
        running = state is MotionState.RUNNING
        for listener in list(self._running_listeners):
            listener(running)
        if not running:
            waiters, self._idle_waiters = self._idle_waiters, []
            for waiter in waiters:
                if not waiter.done():
                    waiter.set_result(None)

    # ------------------------------------------------------------------
    # Commands and queries
    # ------------------------------------------------------------------
    def is_running(self) -> bool:
        return self.state is MotionState.RUNNING

    @property
    def progress(self) -> Optional[float]:
        """Fraction of the active run already applied, None when idle."""
        if self._run is None:
            return None
        return self._run.previous_fraction

    def command_motion(
        self, pulses: Sequence[int], speed_pulses_per_ms: float
    ) -> None:
        """
        Start animating a relative wheel motion, preempting any active run.

        Args:
            pulses: Pulses to move each wheel, ``[left, right]``. Positive
                    values pay out string.
            speed_pulses_per_ms: Speed of the wheel with the larger move.

        Raises:
            ParameterError: If ``pulses`` does not have one value per wheel or
                            the speed is not positive.
        """
        if len(pulses) != WHEEL_COUNT:
            raise ParameterError(
                f"pulses must have {WHEEL_COUNT} values, got {len(pulses)}."
            )
        if speed_pulses_per_ms <= 0:
            raise ParameterError("speed_pulses_per_ms must be positive.")

        if self.is_running():
            self._end_run(completed=False)

        max_pulses = max(abs(pulses[LEFT_WHEEL]), abs(pulses[RIGHT_WHEEL]))
        self.duration_ms = int(max_pulses / speed_pulses_per_ms)
        distance = (
            self.model.pulses_to_radians(pulses[LEFT_WHEEL]),
            self.model.pulses_to_radians(pulses[RIGHT_WHEEL]),
        )

        if self.duration_ms <= 0:
            if max_pulses:
                # Under one millisecond: applied in one step rather than dropped
                logger.debug(f"Applying motion {list(pulses)} without animation.")
                self.model.begin_motion(distance)
                self.model.advance(1.0, distance)
                self._notify_state_changed()
            return

        self.model.begin_motion(distance)
        self._run = ActiveRun(
            start_ms=self._clock(),
            duration_ms=self.duration_ms,
            distance=distance,
        )
        if self.timing_source is not None:
            self.timing_source.add_tick_listener(self.tick)
        logger.info(
            f"Motion {list(pulses)} started: {self.duration_ms}ms at "
            f"{speed_pulses_per_ms} pulses/ms."
        )
        self._set_state(MotionState.RUNNING)

    def tick(self, now_ms: Optional[float] = None) -> None:
        """
        Advance the active run to the time ``now_ms`` (defaults to the clock).

        Does nothing when idle or when no time has passed since the previous
        tick, so the applied fraction is strictly increasing.
        """
        run = self._run
        if run is None:
            return
        if now_ms is None:
            now_ms = self._clock()

        fraction = min(1.0, (now_ms - run.start_ms) / run.duration_ms)
        if fraction <= run.previous_fraction:
            return

        self.model.advance(fraction - run.previous_fraction, run.distance)
        run.previous_fraction = fraction
        logger.debug(f"Tick at fraction {fraction:.4f}.")
        try:
            self._notify_state_changed()
        except Exception as exc:
            self._fail_idle_waiters(exc)
            raise
        finally:
            if fraction >= 1.0:
                self._end_run(completed=True)

    def _fail_idle_waiters(self, exc: Exception) -> None:
        waiters, self._idle_waiters = self._idle_waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_exception(exc)

    def _end_run(self, completed: bool) -> None:
        run, self._run = self._run, None
        if self.timing_source is not None:
            self.timing_source.remove_tick_listener(self.tick)
        self.model.clear_pending()
        if completed:
            logger.info(f"Motion completed after {run.duration_ms}ms.")
        else:
            logger.warning(
                f"Motion preempted at fraction {run.previous_fraction:.4f}; "
                f"the remainder is discarded."
            )
        self._set_state(MotionState.IDLE)

    async def wait_until_idle(self) -> None:
        """Wait until the active run, if any, completes or is preempted."""
        if not self.is_running():
            return
        waiter = asyncio.get_running_loop().create_future()
        self._idle_waiters.append(waiter)
        await waiter
