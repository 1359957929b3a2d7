# whiteboard_sim/config.py
"""
Configuration for the whiteboard simulator.

The device geometry and the animation settings are held in a
:class:`WhiteboardConfig` and can be saved to and loaded from JSON files.
"""
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Union

from . import constants as const
from .exceptions import ConfigurationError, InvalidGeometry
from .kinematics import KinematicModel

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class WhiteboardConfig:
    """Construction-time settings of a simulated whiteboard robot."""
    # Device geometry, mm
    pulley_radius: float = const.DEFAULT_PULLEY_RADIUS
    pulley_separation: float = const.DEFAULT_PULLEY_SEPARATION
    wheel_radius: float = const.DEFAULT_WHEEL_RADIUS
    pulses_per_revolution: float = const.DEFAULT_PULSES_PER_REVOLUTION

    # Initial pen offset from the left pulley, mm
    start_offset_x: float = const.DEFAULT_START_OFFSET_X
    start_offset_y: float = const.DEFAULT_START_OFFSET_Y

    # Animation settings
    tick_period_ms: float = const.DEFAULT_TICK_PERIOD_MS
    speed_pulses_per_ms: float = const.DEFAULT_SPEED_PULSES_PER_MS

    # Metadata
    name: str = "default"
    description: str = "Default whiteboard configuration"

    def validate(self) -> None:
        """
        Check the settings without building anything.

        Raises:
            ConfigurationError: If a setting is out of range.
        """
        try:
            self.create_model()
        except InvalidGeometry as exc:
            raise ConfigurationError(f"Invalid geometry: {exc}") from exc
        except TypeError as exc:
            raise ConfigurationError(f"Geometry values must be numbers: {exc}") from exc
        if self.tick_period_ms <= 0:
            raise ConfigurationError("tick_period_ms must be positive.")
        if self.speed_pulses_per_ms <= 0:
            raise ConfigurationError("speed_pulses_per_ms must be positive.")

    def create_model(self) -> KinematicModel:
        return KinematicModel(
            pulley_radius=self.pulley_radius,
            pulley_separation=self.pulley_separation,
            wheel_radius=self.wheel_radius,
            pulses_per_revolution=self.pulses_per_revolution,
            start_offset_x=self.start_offset_x,
            start_offset_y=self.start_offset_y,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "WhiteboardConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")
        return cls(**data)


def load_config(path: PathLike) -> WhiteboardConfig:
    """
    Load and validate a configuration from a JSON file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or holds
                            unknown keys or invalid values.
    """
    config_file = Path(path)
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_data = json.load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file not found: {config_file}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Error reading configuration {config_file}: {exc}") from exc

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Configuration {config_file} must be a JSON object.")

    config = WhiteboardConfig.from_dict(config_data)
    config.validate()
    logger.info(f"Loaded configuration '{config.name}' from {config_file}")
    return config


def save_config(config: WhiteboardConfig, path: PathLike) -> None:
    """Write ``config`` to ``path`` as indented JSON."""
    config_file = Path(path)
    try:
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
    except OSError as exc:
        raise ConfigurationError(f"Error saving configuration {config_file}: {exc}") from exc
    logger.info(f"Saved configuration '{config.name}' to {config_file}")
