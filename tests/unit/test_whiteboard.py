"""Unit tests for the Whiteboard host and its PenTrace.

The synchronous tests tick the scheduler with a manual clock; the asyncio
tests run whole command scripts on the timing source.
"""

import asyncio

import pytest

from whiteboard_sim.commands import parse_script
from whiteboard_sim.config import WhiteboardConfig
from whiteboard_sim.exceptions import UnreachablePose
from whiteboard_sim.whiteboard import PenTrace
from whiteboard_sim.whiteboard import Whiteboard


class TestPenTrace:

    def test_segments_only_while_drawing(self):
        trace = PenTrace(previous_point=(0.0, 0.0))
        trace.move_to((3.0, 4.0), drawing=True)
        trace.move_to((6.0, 8.0), drawing=False)
        trace.move_to((6.0, 9.0), drawing=True)
        assert trace.segments == [((0.0, 0.0), (3.0, 4.0)), ((6.0, 8.0), (6.0, 9.0))]
        assert trace.total_length == pytest.approx(6.0)
        assert trace.previous_point == (6.0, 9.0)

    def test_no_segment_for_unchanged_point(self):
        trace = PenTrace(previous_point=(1.0, 1.0))
        trace.move_to((1.0, 1.0), drawing=True)
        assert trace.segments == []

    def test_clear(self):
        trace = PenTrace(previous_point=(0.0, 0.0))
        trace.move_to((1.0, 0.0), drawing=True)
        trace.clear()
        assert trace.segments == []
        assert trace.total_length == 0.0


class TestWhiteboard:

    def test_starts_idle_with_pen_up(self):
        whiteboard = Whiteboard()
        assert not whiteboard.is_running()
        assert not whiteboard.drawing
        assert whiteboard.trace.previous_point == whiteboard.pose().pen_position
        assert whiteboard.timing_source.period_ms == 30

    def test_drawing_move_records_segments(self, clock):
        whiteboard = Whiteboard(WhiteboardConfig(), clock=clock)
        start = whiteboard.pose().pen_position
        whiteboard.set_drawing(True)
        whiteboard.move_wheels([100, -100])  # 500 ms at the default speed
        for _ in range(5):
            clock.advance(100)
            whiteboard.scheduler.tick()
        assert not whiteboard.is_running()
        assert len(whiteboard.trace.segments) == 5
        assert whiteboard.trace.segments[0][0] == start
        assert whiteboard.trace.segments[-1][1] == whiteboard.pose().pen_position

    def test_pen_up_move_records_nothing(self, clock):
        whiteboard = Whiteboard(clock=clock)
        whiteboard.move_wheels([50, 50])
        clock.advance(1000)
        whiteboard.scheduler.tick()
        assert whiteboard.trace.segments == []
        assert whiteboard.trace.previous_point == whiteboard.pose().pen_position

    def test_execute_sets_pen_from_command(self, clock):
        whiteboard = Whiteboard(clock=clock)
        draw, move = parse_script("D 10 0\nM 0 10\n")
        whiteboard.execute(draw)
        assert whiteboard.drawing
        assert whiteboard.is_running()
        whiteboard.execute(move)
        assert not whiteboard.drawing
        assert whiteboard.scheduler.duration_ms == 50

    def test_unreachable_final_tick_leaves_board_idle(self, clock):
        whiteboard = Whiteboard(clock=clock)
        whiteboard.move_wheels([-30000, -30000], speed_pulses_per_ms=1000.0)  # 30 ms
        clock.advance(100)
        with pytest.raises(UnreachablePose):
            whiteboard.scheduler.tick()
        assert not whiteboard.is_running()
        assert whiteboard.model.pending_distance == (0.0, 0.0)

    def test_explicit_speed(self, clock):
        whiteboard = Whiteboard(clock=clock)
        whiteboard.move_wheels([100, 0], speed_pulses_per_ms=1.0)
        assert whiteboard.scheduler.duration_ms == 100


@pytest.mark.asyncio
async def test_run_commands_to_completion(fast_config):
    whiteboard = Whiteboard(fast_config)
    model = whiteboard.model
    start = model.string_lengths
    commands = parse_script("D 40 -40\nM -10 0\n")
    try:
        await asyncio.wait_for(whiteboard.run_commands(commands), timeout=5.0)
    finally:
        await whiteboard.close()

    mm_per_pulse = model.wheel_radius * model.radians_per_pulse
    assert model.string_lengths[0] == pytest.approx(start[0] + 30 * mm_per_pulse)
    assert model.string_lengths[1] == pytest.approx(start[1] - 40 * mm_per_pulse)
    assert not whiteboard.is_running()
    assert not whiteboard.drawing
    assert whiteboard.trace.segments
    assert whiteboard.trace.previous_point == whiteboard.pose().pen_position


@pytest.mark.asyncio
async def test_unreachable_pose_fails_the_run():
    # Reel in far more string than exists.
    config = WhiteboardConfig(tick_period_ms=2, speed_pulses_per_ms=1000.0)
    whiteboard = Whiteboard(config)
    commands = parse_script("M -30000 -30000\n")
    try:
        with pytest.raises(UnreachablePose):
            await asyncio.wait_for(whiteboard.run_commands(commands), timeout=5.0)
    finally:
        await whiteboard.close()
