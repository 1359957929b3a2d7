"""Unit tests for the KinematicModel class.

These tests verify construction checks, the incremental wheel/string update
performed by `advance`, and the law-of-cosines pose computation, including
detection of string lengths that cannot form a triangle.
"""

import math

import pytest

from whiteboard_sim.exceptions import InvalidGeometry
from whiteboard_sim.exceptions import ParameterError
from whiteboard_sim.exceptions import UnreachablePose
from whiteboard_sim.kinematics import KinematicModel
from whiteboard_sim.kinematics import Pose


def make_model(**overrides):
    # Builds a model from the fixture geometry with some values replaced.
    params = dict(
        pulley_radius=5.0,
        pulley_separation=100.0,
        wheel_radius=5.0,
        pulses_per_revolution=200,
        start_offset_x=50.0,
        start_offset_y=30.0,
    )
    params.update(overrides)
    return KinematicModel(**params)


class TestInitialization:

    def test_initial_string_lengths(self):
        # String lengths are the straight distances from each pulley to the start offset.
        model = make_model(start_offset_x=30.0, start_offset_y=40.0)
        assert model.string_lengths[0] == pytest.approx(50.0)
        # sqrt(30^2 + 40^2) = 50
        assert model.string_lengths[1] == pytest.approx(math.sqrt(70.0 ** 2 + 40.0 ** 2))

    def test_initial_state_is_at_rest(self, model):
        assert model.wheel_angles == (0.0, 0.0)
        assert model.pending_distance == (0.0, 0.0)

    def test_radians_per_pulse(self, model):
        # 200 pulses make one full revolution.
        assert model.radians_per_pulse == pytest.approx(2 * math.pi / 200)
        assert model.pulses_to_radians(50) == pytest.approx(math.pi / 2)

    @pytest.mark.parametrize(
        "field",
        ["pulley_radius", "pulley_separation", "wheel_radius", "pulses_per_revolution"],
    )
    def test_non_positive_dimension_rejected(self, field):
        with pytest.raises(InvalidGeometry, match=f"{field} must be positive."):
            make_model(**{field: 0})
        with pytest.raises(InvalidGeometry, match=f"{field} must be positive."):
            make_model(**{field: -1.0})

    def test_start_offset_on_pulley_centre_rejected(self):
        # A zero-length string cannot hold the pen.
        with pytest.raises(InvalidGeometry):
            make_model(start_offset_x=0.0, start_offset_y=0.0)

    def test_repr_lists_geometry(self, model):
        text = repr(model)
        assert text.startswith("KinematicModel(")
        assert "pulley_separation=100.0" in text


class TestAdvance:

    def test_advance_updates_angles_and_strings(self, model):
        start = model.string_lengths
        model.advance(0.5, [2.0, -1.0])
        # Each wheel turns distance * fraction_delta radians.
        assert model.wheel_angles == pytest.approx((1.0, -0.5))
        # The string moves wheel_radius mm per radian.
        assert model.string_lengths[0] == pytest.approx(start[0] + 5.0)
        assert model.string_lengths[1] == pytest.approx(start[1] - 2.5)

    def test_advance_consumes_pending_distance(self, model):
        model.begin_motion([2.0, -1.0])
        assert model.pending_distance == (2.0, -1.0)
        model.advance(0.25, [2.0, -1.0])
        assert model.pending_distance == pytest.approx((1.5, -0.75))
        model.advance(0.75, [2.0, -1.0])
        assert model.pending_distance == pytest.approx((0.0, 0.0))

    def test_clear_pending(self, model):
        model.begin_motion([1.0, 1.0])
        model.clear_pending()
        assert model.pending_distance == (0.0, 0.0)

    def test_advance_requires_two_wheels(self, model):
        with pytest.raises(ParameterError):
            model.advance(0.5, [1.0, 2.0, 3.0])
        with pytest.raises(ParameterError):
            model.begin_motion([1.0])

    def test_incremental_steps_match_single_step(self):
        # Many small slices end where a single full step ends.
        stepped = make_model()
        single = make_model()
        distance = [3.7, -1.3]
        previous = 0.0
        for i in range(1, 34):
            fraction = i / 33
            stepped.advance(fraction - previous, distance)
            previous = fraction
        single.advance(1.0, distance)
        assert stepped.string_lengths == pytest.approx(single.string_lengths, abs=1e-9)
        assert stepped.wheel_angles == pytest.approx(single.wheel_angles, abs=1e-9)


class TestQueryPose:

    @pytest.mark.parametrize("height", [1.0, 30.0, 250.0])
    def test_symmetric_start_is_centred(self, height):
        model = make_model(start_offset_x=50.0, start_offset_y=height)
        assert model.string_lengths[0] == model.string_lengths[1]
        pose = model.query_pose()
        assert pose.x == pytest.approx(50.0)
        # Symmetric strings leave their pulleys at the same angle.
        assert pose.angle0 == pytest.approx(pose.angle1)

    def test_pen_below_pulleys(self, model):
        pose = model.query_pose()
        assert pose.y > 0
        # The pulley-to-pen distance includes the pulley radius offset.
        l0 = math.hypot(5.0, model.string_lengths[0])
        assert math.hypot(pose.x, pose.y) == pytest.approx(l0)

    def test_string_angle_formula(self, model):
        pose = model.query_pose()
        l0 = math.hypot(5.0, model.string_lengths[0])
        alpha0 = math.atan2(pose.y, pose.x)
        expected = math.atan(5.0 / model.string_lengths[0]) + alpha0
        assert pose.angle0 == pytest.approx(expected)
        assert pose.x == pytest.approx(math.cos(alpha0) * l0)

    def test_pose_reports_wheel_angles(self, model):
        model.advance(1.0, [0.25, -0.5])
        pose = model.query_pose()
        assert pose.wheel_angles == pytest.approx((0.25, -0.5))

    def test_pose_as_dict(self, model):
        pose = model.query_pose()
        assert isinstance(pose, Pose)
        assert set(pose.as_dict()) == {
            "x", "y", "angle0", "angle1", "wheelAngle0", "wheelAngle1"
        }
        assert pose.pen_position == (pose.x, pose.y)

    def test_query_pose_does_not_mutate(self, model):
        before = (model.string_lengths, model.wheel_angles)
        model.query_pose()
        model.query_pose()
        assert (model.string_lengths, model.wheel_angles) == before

    def test_retracted_strings_are_unreachable(self, model):
        # Pull both strings in to 1 mm: they cannot span a 100 mm separation.
        lengths = model.string_lengths
        model.advance(1.0, [(1.0 - lengths[0]) / 5.0, (1.0 - lengths[1]) / 5.0])
        assert model.string_lengths == pytest.approx((1.0, 1.0))
        with pytest.raises(UnreachablePose) as exc_info:
            model.query_pose()
        assert exc_info.value.string_lengths == pytest.approx((1.0, 1.0))

    def test_non_positive_string_is_unreachable(self, model):
        model.advance(1.0, [-20.0, 0.0])  # 100 mm of retraction
        with pytest.raises(UnreachablePose, match="not positive") as exc_info:
            model.query_pose()
        assert exc_info.value.wheel == 0

    def test_advance_does_not_validate_eagerly(self, model):
        # Passing through an unreachable state is allowed; only queries fail.
        model.advance(1.0, [-20.0, 0.0])
        model.advance(1.0, [20.0, 0.0])
        model.query_pose()


class TestInverse:

    def test_pulses_to_reaches_target(self):
        model = make_model(
            pulley_radius=10.0,
            pulley_separation=1000.0,
            wheel_radius=10.0,
            pulses_per_revolution=280,
            start_offset_x=500.0,
            start_offset_y=500.0,
        )
        left, right = model.pulses_to(400.0, 600.0)
        assert isinstance(left, int) and isinstance(right, int)
        model.advance(1.0, [model.pulses_to_radians(left), model.pulses_to_radians(right)])
        pose = model.query_pose()
        # Rounding to whole pulses leaves well under a millimetre of error.
        assert pose.x == pytest.approx(400.0, abs=1.0)
        assert pose.y == pytest.approx(600.0, abs=1.0)

    def test_string_lengths_at_matches_query_pose(self, model):
        x, y = model.query_pose().pen_position
        assert model.string_lengths_at(x, y) == pytest.approx(model.string_lengths)

    def test_unreachable_targets(self, model):
        with pytest.raises(UnreachablePose):
            model.pulses_to(50.0, 0.0)
        with pytest.raises(UnreachablePose):
            model.pulses_to(1.0, 1.0)  # Inside the left pulley
