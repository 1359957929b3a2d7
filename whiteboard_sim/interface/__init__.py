"""
Console interfaces for the whiteboard simulator.
"""

from .rich_dashboard import RichDashboard, create_pose_table

__all__ = ["RichDashboard", "create_pose_table"]
