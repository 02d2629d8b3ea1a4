"""Normalized field coordinate system and clamping utilities."""

import numpy as np
from typing import Tuple
from ..core.models import Point

# 1 yard of depth = 0.04 normalized units; the only yards-to-field conversion
FIELD_SCALE = 0.04

# Default route depth (yards) when a template omits it
DEFAULT_ROUTE_DEPTH_YARDS = 10.0

# Safe drawing sub-range every emitted point is clamped into
MIN_X, MAX_X = 0.05, 0.95
MIN_Y, MAX_Y = -0.95, 0.95

FIELD_CENTER_X = 0.5


def yards_to_field(depth_yards: float) -> float:
    """Convert a route depth in yards to normalized vertical units."""
    return depth_yards * FIELD_SCALE


def clamp_xy(x: float, y: float) -> Tuple[float, float]:
    """Clip a coordinate pair into the safe bounds."""
    return float(np.clip(x, MIN_X, MAX_X)), float(np.clip(y, MIN_Y, MAX_Y))


def clamp_point(point: Point) -> Point:
    """Return a copy of point clipped into the safe bounds."""
    x, y = clamp_xy(point.x, point.y)
    return Point(x=x, y=y)


def in_bounds(point: Point) -> bool:
    """Check if a point lies inside the safe bounds."""
    return MIN_X <= point.x <= MAX_X and MIN_Y <= point.y <= MAX_Y


def sideline_sign(start: Point) -> float:
    """
    Lateral sign pointing toward the nearest sideline.

    Players right of center (x > 0.5) get +1, everyone else -1,
    so a player aligned exactly on the ball breaks left.
    """
    return 1.0 if start.x > FIELD_CENTER_X else -1.0


def offset(start: Point, dx: float, dy: float) -> Point:
    """Point displaced from start, clamped into the safe bounds."""
    x, y = clamp_xy(start.x + dx, start.y + dy)
    return Point(x=x, y=y)
