"""
Kinematics for the two-pulley string plotter.
"""
from .kinematic_model import KinematicModel, Pose

__all__ = [
    "KinematicModel",
    "Pose",
]
