"""
Shared test fixtures for the whiteboard simulator.

The motion scheduler reads time from an injectable clock. Tests use
``ManualClock`` so that every tick happens at a chosen time and runs are
fully deterministic; only the asyncio tests use real time.
"""

import pytest

from whiteboard_sim import KinematicModel, MotionScheduler, WhiteboardConfig


class ManualClock:
    """Clock returning a settable time in milliseconds"""

    def __init__(self, now_ms: float = 0.0):
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, delta_ms: float) -> float:
        self.now_ms += delta_ms
        return self.now_ms


@pytest.fixture
def clock():
    # A fresh clock at t=0 for every test.
    return ManualClock()


@pytest.fixture
def model():
    # Small board: 100 mm between 5 mm pulleys, pen started in the middle.
    return KinematicModel(
        pulley_radius=5.0,
        pulley_separation=100.0,
        wheel_radius=5.0,
        pulses_per_revolution=200,
        start_offset_x=50.0,
        start_offset_y=30.0,
    )


@pytest.fixture
def scheduler(model, clock):
    # Scheduler without a timing source; tests call tick() themselves.
    return MotionScheduler(model, clock=clock)


@pytest.fixture
def fast_config():
    # Default geometry with a short tick and a fast wheel so async runs finish quickly.
    return WhiteboardConfig(tick_period_ms=2, speed_pulses_per_ms=2.0)
