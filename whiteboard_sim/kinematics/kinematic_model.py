# whiteboard_sim/kinematics/kinematic_model.py
"""
Kinematic model of a two-pulley string plotter.

The pen hangs from two strings. Each string leaves its pulley tangentially
and its free length is changed by a motorised wheel. Pulley 0 (left) sits at
the origin and pulley 1 (right) at ``(pulley_separation, 0)``; the y axis
points down the drawing surface.
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from ..constants import LEFT_WHEEL, RIGHT_WHEEL, WHEEL_COUNT
from ..exceptions import InvalidGeometry, ParameterError, UnreachablePose

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pose:
    """Snapshot of the pen position, string angles and wheel angles."""

    x: float
    y: float
    angle0: float
    angle1: float
    wheel_angle0: float
    wheel_angle1: float

    @property
    def pen_position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def string_angles(self) -> Tuple[float, float]:
        return self.angle0, self.angle1

    @property
    def wheel_angles(self) -> Tuple[float, float]:
        return self.wheel_angle0, self.wheel_angle1

    def as_dict(self) -> Dict[str, float]:
        return {
            "x": self.x,
            "y": self.y,
            "angle0": self.angle0,
            "angle1": self.angle1,
            "wheelAngle0": self.wheel_angle0,
            "wheelAngle1": self.wheel_angle1,
        }


def _check_pair(name: str, values: Sequence[float]) -> Tuple[float, float]:
    if len(values) != WHEEL_COUNT:
        raise ParameterError(
            f"{name} must have {WHEEL_COUNT} values, got {len(values)}."
        )
    return float(values[LEFT_WHEEL]), float(values[RIGHT_WHEEL])


class KinematicModel:
    """
    Owns the wheel and string state of the plotter.

    Wheel angles and string lengths are only ever changed through
    :meth:`advance`. The pen position and string angles are recomputed from
    the string lengths by :meth:`query_pose` and are never stored.

    Attributes:
        pulley_radius (float): Radius of each pulley (mm).
        pulley_separation (float): Distance between the pulley centres (mm).
        wheel_radius (float): Radius of each motor wheel (mm).
        pulses_per_revolution (float): Motor pulses per wheel revolution.
        radians_per_pulse (float): Wheel rotation for one pulse (radians).
    """

    def __init__(
        self,
        pulley_radius: float,
        pulley_separation: float,
        wheel_radius: float,
        pulses_per_revolution: float,
        start_offset_x: float,
        start_offset_y: float,
    ):
        """
        Initialize the model from the device geometry and the pen start offset.

        Args:
            pulley_radius: Radius of each pulley in mm.
            pulley_separation: Horizontal distance between the pulley centres in mm.
            wheel_radius: Radius of each motor wheel in mm. One radian of wheel
                          rotation feeds ``wheel_radius`` mm of string.
            pulses_per_revolution: Motor pulses for one full wheel revolution.
            start_offset_x: Initial pen offset from the left pulley, along the
                            pulley line, in mm.
            start_offset_y: Initial pen offset below the pulley line in mm.

        Raises:
            InvalidGeometry: If a radius, the separation or the pulse count is
                             not positive, or the start offset puts the pen on
                             a pulley centre.
        """
        if pulley_radius <= 0:
            raise InvalidGeometry("pulley_radius must be positive.")
        if pulley_separation <= 0:
            raise InvalidGeometry("pulley_separation must be positive.")
        if wheel_radius <= 0:
            raise InvalidGeometry("wheel_radius must be positive.")
        if pulses_per_revolution <= 0:
            raise InvalidGeometry("pulses_per_revolution must be positive.")

        self.pulley_radius = float(pulley_radius)
        self.pulley_separation = float(pulley_separation)
        self.wheel_radius = float(wheel_radius)
        self.pulses_per_revolution = pulses_per_revolution
        self.radians_per_pulse = (2.0 * math.pi) / pulses_per_revolution

        left = math.sqrt(start_offset_x ** 2 + start_offset_y ** 2)
        right = math.sqrt(
            (pulley_separation - start_offset_x) ** 2 + start_offset_y ** 2
        )
        if left <= 0 or right <= 0:
            raise InvalidGeometry(
                f"Start offset ({start_offset_x}, {start_offset_y}) gives a "
                f"zero string length."
            )

        self._string_lengths = [left, right]
        self._wheel_angles = [0.0, 0.0]
        self._pending_distance = [0.0, 0.0]

        logger.info(
            f"Initialized KinematicModel: PulleyRadius={self.pulley_radius}, "
            f"Separation={self.pulley_separation}, WheelRadius={self.wheel_radius}, "
            f"Strings=({left:.3f}, {right:.3f})"
        )

    @property
    def string_lengths(self) -> Tuple[float, float]:
        """Current free length of each string, mm."""
        return tuple(self._string_lengths)

    @property
    def wheel_angles(self) -> Tuple[float, float]:
        """Cumulative rotation of each wheel since start, radians."""
        return tuple(self._wheel_angles)

    @property
    def pending_distance(self) -> Tuple[float, float]:
        """Rotation each wheel still owes the in-flight motion, radians."""
        return tuple(self._pending_distance)

    def pulses_to_radians(self, pulses: float) -> float:
        return pulses * self.radians_per_pulse

    def begin_motion(self, distance: Sequence[float]) -> None:
        """Record the total rotation (radians) of a motion that is starting."""
        self._pending_distance = list(_check_pair("distance", distance))

    def clear_pending(self) -> None:
        """Forget whatever is left of the current motion."""
        self._pending_distance = [0.0, 0.0]

    def advance(
        self, fraction_delta: float, distance_per_fraction: Sequence[float]
    ) -> None:
        """
        Rotate both wheels by a slice of a motion.

        Args:
            fraction_delta: The part of the motion completed since the previous
                            call, as a fraction of the whole motion.
            distance_per_fraction: Total rotation of each wheel over the whole
                                   motion, in radians.

        Raises:
            ParameterError: If ``distance_per_fraction`` does not have one
                            value per wheel.
        """
        distances = _check_pair("distance_per_fraction", distance_per_fraction)
        for i, distance in enumerate(distances):
            delta_angle = distance * fraction_delta
            self._wheel_angles[i] += delta_angle
            self._string_lengths[i] += self.wheel_radius * delta_angle
            self._pending_distance[i] -= delta_angle

    def _side_angle(self, near: float, far: float) -> Tuple[float, float]:
        # Law of cosines for the angle at the pulley owning ``near``
        cos_alpha = (near ** 2 + self.pulley_separation ** 2 - far ** 2) / (
            2 * near * self.pulley_separation
        )
        if not (-1.0 <= cos_alpha <= 1.0):
            raise UnreachablePose(
                f"Strings cannot reach each other across a separation of "
                f"{self.pulley_separation} (cos alpha = {cos_alpha:.4f}).",
                string_lengths=self.string_lengths,
            )
        return cos_alpha, math.acos(cos_alpha)

    def query_pose(self) -> Pose:
        """
        Compute the pen position and string angles from the string lengths.

        Returns:
            A :class:`Pose` with the pen position, the angle of each string off
            its pulley's reference direction and the wheel angles.

        Raises:
            UnreachablePose: If a string length is not positive or the two
                             strings and the pulley separation do not form a
                             triangle.
        """
        strings = self._string_lengths
        for i, length in enumerate(strings):
            if length <= 0:
                msg = f"String length {length:.3f} is not positive."
                logger.error(msg)
                raise UnreachablePose(msg, string_lengths=self.string_lengths, wheel=i)

        # Distance from each pulley centre to the pen, the string leaving the
        # pulley rim at a tangent
        l0, l1 = (math.hypot(self.pulley_radius, s) for s in strings)

        try:
            cos_alpha0, alpha0 = self._side_angle(l0, l1)
            _, alpha1 = self._side_angle(l1, l0)
        except UnreachablePose as exc:
            logger.error(f"Pose is unreachable: {exc}")
            raise

        return Pose(
            x=cos_alpha0 * l0,
            y=math.sin(alpha0) * l0,
            angle0=math.atan(self.pulley_radius / strings[LEFT_WHEEL]) + alpha0,
            angle1=math.atan(self.pulley_radius / strings[RIGHT_WHEEL]) + alpha1,
            wheel_angle0=self._wheel_angles[LEFT_WHEEL],
            wheel_angle1=self._wheel_angles[RIGHT_WHEEL],
        )

    def string_lengths_at(self, x: float, y: float) -> Tuple[float, float]:
        """
        String lengths that put the pen at ``(x, y)``.

        Raises:
            UnreachablePose: If the point is not below the pulley line or lies
                             within a pulley radius of a pulley centre.
        """
        if y <= 0:
            raise UnreachablePose(f"Target ({x}, {y}) is not below the pulleys.")
        lengths = []
        for i, dx in enumerate((x, self.pulley_separation - x)):
            tangent_sq = dx ** 2 + y ** 2 - self.pulley_radius ** 2
            if tangent_sq <= 0:
                raise UnreachablePose(
                    f"Target ({x}, {y}) is inside the pulley.", wheel=i
                )
            lengths.append(math.sqrt(tangent_sq))
        return lengths[LEFT_WHEEL], lengths[RIGHT_WHEEL]

    def pulses_to(self, x: float, y: float) -> Tuple[int, int]:
        """
        Wheel pulses that move the pen from its current position to ``(x, y)``.

        The result is rounded to whole pulses, so the pen lands within one
        pulse of string feed of the target.
        """
        targets = self.string_lengths_at(x, y)
        mm_per_pulse = self.wheel_radius * self.radians_per_pulse
        left, right = (
            round((target - current) / mm_per_pulse)
            for target, current in zip(targets, self._string_lengths)
        )
        return left, right

    def get_parameters(self) -> dict:
        """Return the geometry of this model."""
        return {
            "pulley_radius": self.pulley_radius,
            "pulley_separation": self.pulley_separation,
            "wheel_radius": self.wheel_radius,
            "pulses_per_revolution": self.pulses_per_revolution,
            "radians_per_pulse": self.radians_per_pulse,
        }

    def __repr__(self) -> str:
        params = self.get_parameters()
        param_str = ", ".join(f"{k}={v}" for k, v in params.items())
        return f"{self.__class__.__name__}({param_str})"
