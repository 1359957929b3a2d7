"""
Rich console dashboard for the whiteboard simulator.

Shows the pen pose, string and wheel state, run status and the drawn trace,
plus a short log of run transitions.
"""

import asyncio
import math
import time
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..constants import WHEEL_NAMES
from ..exceptions import UnreachablePose

if TYPE_CHECKING:
    from ..whiteboard import Whiteboard


@dataclass
class DashboardState:
    """Current state of the dashboard display"""
    start_time: float
    refresh_rate_ms: int
    stopped: bool = False


def create_pose_table(whiteboard: "Whiteboard") -> Table:
    """Table of the pen position and the per-wheel state."""
    model = whiteboard.model
    table = Table(show_header=True, header_style="bold magenta", box=None)
    table.add_column("Wheel", style="cyan", width=6)
    table.add_column("String (mm)", justify="right")
    table.add_column("String angle", justify="right")
    table.add_column("Wheel angle", justify="right")
    table.add_column("Pending (rad)", justify="right")

    try:
        pose = model.query_pose()
    except UnreachablePose:
        pose = None

    for i, name in sorted(WHEEL_NAMES.items()):
        if pose is not None:
            angle_text = f"{math.degrees(pose.string_angles[i]):.2f}°"
        else:
            angle_text = "n/a"
        table.add_row(
            name,
            f"{model.string_lengths[i]:.3f}",
            angle_text,
            f"{math.degrees(model.wheel_angles[i]):.1f}°",
            f"{model.pending_distance[i]:.4f}",
        )
    return table


def create_pen_text(whiteboard: "Whiteboard") -> Text:
    try:
        x, y = whiteboard.pose().pen_position
    except UnreachablePose as exc:
        return Text(f"Pen: unreachable ({exc.message})", style="bold red")
    text = Text(f"Pen: ({x:.3f}, {y:.3f}) mm", style="bold")
    text.append(" | drawing" if whiteboard.drawing else " | pen up", style="dim")
    return text


def create_trace_text(whiteboard: "Whiteboard") -> Text:
    trace = whiteboard.trace
    return Text(
        f"Segments: {len(trace.segments)} | Drawn length: {trace.total_length:.2f} mm"
    )


class RichDashboard:
    """
    Live console view of a :class:`Whiteboard`.

    Features:
    - Pen position and pen state
    - Per-wheel string length, string angle, wheel angle and pending rotation
    - Run status and progress
    - Scrolling event log of run transitions
    """

    def __init__(
        self,
        whiteboard: "Whiteboard",
        refresh_rate_ms: int = 200,
        no_color: bool = False,
        console: Optional[Console] = None,
    ):
        """
        Initialize the Rich dashboard.

        Args:
            whiteboard: The simulated robot to display
            refresh_rate_ms: Dashboard refresh rate in milliseconds
            no_color: Disable color output for compatibility
            console: Console to draw on; a new one is created if omitted
        """
        self.whiteboard = whiteboard
        self.console = console or Console(no_color=no_color)
        self.state = DashboardState(
            start_time=time.time(),
            refresh_rate_ms=refresh_rate_ms
        )

        # Event log (circular buffer)
        self.event_log: List[str] = []
        self.max_log_entries = 10

        whiteboard.scheduler.add_running_listener(self._on_running_changed)

    def _on_running_changed(self, running: bool):
        if running:
            self.add_event(f"Run started ({self.whiteboard.scheduler.duration_ms}ms)")
        else:
            self.add_event("Run stopped")

    def add_event(self, message: str):
        """Add a timestamped entry to the event log"""
        elapsed = time.time() - self.state.start_time
        self.event_log.append(f"[{elapsed:7.2f}s] {message}")
        if len(self.event_log) > self.max_log_entries:
            self.event_log = self.event_log[-self.max_log_entries:]

    def _create_status_text(self) -> Text:
        scheduler = self.whiteboard.scheduler
        if scheduler.is_running():
            progress = scheduler.progress or 0.0
            return Text(f"RUNNING {progress * 100:5.1f}%", style="bold green")
        return Text("IDLE", style="bold yellow")

    def _create_event_log_panel(self) -> Panel:
        """Create the event log panel"""
        if not self.event_log:
            content = Text("No events", style="dim")
        else:
            content = Text("\n".join(self.event_log))
        return Panel(content, title="Events", border_style="blue")

    def render(self) -> Panel:
        """Build the full dashboard renderable"""
        body = Group(
            self._create_status_text(),
            create_pen_text(self.whiteboard),
            create_pose_table(self.whiteboard),
            create_trace_text(self.whiteboard),
            self._create_event_log_panel(),
        )
        return Panel(body, title="Whiteboard Simulator", border_style="green")

    async def run(self):
        """Refresh the dashboard until :meth:`stop` is called"""
        with Live(self.render(), console=self.console, auto_refresh=False) as live:
            while not self.state.stopped:
                live.update(self.render(), refresh=True)
                await asyncio.sleep(self.state.refresh_rate_ms / 1000.0)
            live.update(self.render(), refresh=True)

    def stop(self):
        self.state.stopped = True

    def set_refresh_rate(self, rate_ms: int):
        """Set the dashboard refresh rate"""
        self.state.refresh_rate_ms = max(50, min(2000, rate_ms))  # Clamp between 50ms and 2s
        self.add_event(f"Refresh rate set to {self.state.refresh_rate_ms}ms")
