"""Formatting utilities for run times and poses."""

from __future__ import annotations


def format_duration(seconds: float) -> str:
    """Format a run time as a race clock, e.g. ``1:05.250``."""
    if seconds < 60:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}:{seconds - minutes * 60:06.3f}"


def format_pose(x: float, y: float, yaw: float) -> str:
    """Format a 2D pose for log output."""
    return f"({x:.2f}, {y:.2f}) @ {yaw:.1f}°"
