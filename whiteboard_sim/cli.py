"""
Command-Line Interface for the whiteboard simulator.
Uses 'click' for CLI argument parsing and 'rich' for output.
"""
import asyncio
import logging
from typing import List, Optional

import click
from rich.console import Console

from .commands import WheelCommand, parse_script
from .config import WhiteboardConfig, load_config, save_config
from .exceptions import WhiteboardError
from .interface.rich_dashboard import RichDashboard, create_pose_table
from .whiteboard import Whiteboard

# Basic logging setup for the simulator
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


async def run_simulation(
    whiteboard: Whiteboard,
    commands: List[WheelCommand],
    dashboard: Optional[RichDashboard] = None,
) -> None:
    """Run ``commands`` on ``whiteboard``, optionally with a live dashboard."""
    dashboard_task: Optional[asyncio.Task] = None
    if dashboard is not None:
        dashboard_task = asyncio.create_task(dashboard.run())
    try:
        await whiteboard.run_commands(commands)
    finally:
        await whiteboard.close()
        if dashboard_task is not None:
            dashboard.stop()
            await dashboard_task


@click.command()
@click.argument("script", type=click.File("r"), default="-")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Load the device geometry from a JSON configuration file.",
)
@click.option(
    "--speed",
    type=float,
    help="Wheel speed in pulses per millisecond (overrides the configuration).",
)
@click.option(
    "--tick-ms",
    type=float,
    help="Animation tick period in milliseconds (overrides the configuration).",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False
    ),
    help="Logging level for the simulator.",
    show_default=True,
)
@click.option(
    "--dashboard",
    is_flag=True,
    help="Show a live Rich dashboard while the commands run.",
)
@click.option(
    "--refresh-rate",
    default=200,
    type=int,
    help="Dashboard refresh rate in milliseconds.",
    show_default=True,
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable color output for compatibility.",
)
@click.option(
    "--save-config",
    "save_config_path",
    type=click.Path(dir_okay=False),
    help="Save the effective configuration to a JSON file.",
)
def main(
    script,
    config_path: Optional[str],
    speed: Optional[float],
    tick_ms: Optional[float],
    log_level: str,
    dashboard: bool,
    refresh_rate: int,
    no_color: bool,
    save_config_path: Optional[str],
):
    """
    Whiteboard robot simulator.

    Reads wheel commands ("M <left> <right>" to move with the pen up,
    "D <left> <right>" to draw) from SCRIPT, or standard input, animates them
    on a simulated two-pulley plotter and prints the final pen pose.
    """
    numeric_log_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(numeric_log_level)

    try:
        config = load_config(config_path) if config_path else WhiteboardConfig()
        if speed is not None:
            config.speed_pulses_per_ms = speed
        if tick_ms is not None:
            config.tick_period_ms = tick_ms
        config.validate()
        logger.info(
            f"Config: Separation={config.pulley_separation}, "
            f"PulleyRadius={config.pulley_radius}, WheelRadius={config.wheel_radius}, "
            f"Speed={config.speed_pulses_per_ms} pulses/ms, Tick={config.tick_period_ms}ms"
        )

        if save_config_path:
            save_config(config, save_config_path)

        commands = parse_script(script.read())
        whiteboard = Whiteboard(config)
        dashboard_instance = None
        if dashboard:
            dashboard_instance = RichDashboard(
                whiteboard, refresh_rate_ms=refresh_rate, no_color=no_color
            )

        asyncio.run(run_simulation(whiteboard, commands, dashboard_instance))
    except WhiteboardError as exc:
        logger.error(f"Simulation failed: {exc}")
        raise click.ClickException(str(exc)) from exc

    console = Console(no_color=no_color)
    pose = whiteboard.pose()
    console.print(f"Executed {len(commands)} commands.")
    console.print(f"Pen at ({pose.x:.3f}, {pose.y:.3f}) mm")
    console.print(create_pose_table(whiteboard))
    console.print(
        f"Drawn {len(whiteboard.trace.segments)} segments, "
        f"{whiteboard.trace.total_length:.2f} mm"
    )


if __name__ == "__main__":
    main()
