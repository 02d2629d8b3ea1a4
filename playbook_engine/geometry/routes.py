"""
Route pattern registry.

Each pattern maps to a pure function ``(start, depth, direction) -> (end, control)``
where ``depth`` is already in normalized field units and ``control`` is an
optional bend point. Offsets are expressed toward the sideline of the player's
half of the field; ``calculate_route_points`` clamps every point it returns.
"""

from typing import Callable, Dict, Optional, Tuple

from ..core.models import Point
from .field import FIELD_CENTER_X, clamp_point, sideline_sign

RouteShape = Callable[[Point, float, Optional[str]], Tuple[Point, Optional[Point]]]

ROUTE_PATTERNS: Dict[str, RouteShape] = {}


def route_pattern(*names: str):
    """Register a route shape under one or more pattern names."""
    def register(fn: RouteShape) -> RouteShape:
        for name in names:
            ROUTE_PATTERNS[name] = fn
        return fn
    return register


def _break_sign(start: Point, direction: Optional[str]) -> float:
    """Inside breaks go toward the ball, anything else toward the sideline."""
    toward_sideline = sideline_sign(start)
    return -toward_sideline if direction == "inside" else toward_sideline


@route_pattern("slant", "quick_slant")
def slant(start: Point, depth: float, direction: Optional[str]):
    return Point(x=start.x + 0.1 * _break_sign(start, direction), y=start.y + depth), None


@route_pattern("out", "quick_out", "speed_out")
def out(start: Point, depth: float, direction: Optional[str]):
    return Point(x=start.x + 0.1 * sideline_sign(start), y=start.y + depth * 0.5), None


@route_pattern("corner", "dragon")
def corner(start: Point, depth: float, direction: Optional[str]):
    end = Point(x=start.x + 0.15 * sideline_sign(start), y=start.y + depth)
    return end, Point(x=start.x, y=start.y + depth * 0.5)


@route_pattern("post", "skinny_post")
def post(start: Point, depth: float, direction: Optional[str]):
    end = Point(x=FIELD_CENTER_X, y=start.y + depth)
    return end, Point(x=start.x, y=start.y + depth * 0.5)


@route_pattern("dig", "in", "cross", "shallow", "china", "scissor")
def dig(start: Point, depth: float, direction: Optional[str]):
    end = Point(x=start.x + 0.2 * _break_sign(start, direction), y=start.y + depth)
    return end, Point(x=start.x, y=start.y + depth)


@route_pattern("curl", "hitch", "stick", "snag", "comeback")
def settle(start: Point, depth: float, direction: Optional[str]):
    return Point(x=start.x, y=start.y + depth), None


@route_pattern("flat", "arrow", "swing", "flare")
def flat(start: Point, depth: float, direction: Optional[str]):
    return Point(x=start.x + 0.12 * sideline_sign(start), y=start.y + depth * 0.3), None


@route_pattern("wheel", "follow")
def wheel(start: Point, depth: float, direction: Optional[str]):
    side = sideline_sign(start)
    end = Point(x=start.x + 0.15 * side, y=start.y + depth)
    return end, Point(x=start.x + 0.1 * side, y=start.y + depth * 0.3)


@route_pattern("out_and_up", "out_up")
def out_and_up(start: Point, depth: float, direction: Optional[str]):
    side = sideline_sign(start)
    end = Point(x=start.x + 0.08 * side, y=start.y + depth)
    return end, Point(x=start.x + 0.12 * side, y=start.y + depth * 0.3)


@route_pattern("bench", "drive")
def bench(start: Point, depth: float, direction: Optional[str]):
    lateral = 0.15 * sideline_sign(start) if direction == "outside" else 0.0
    return Point(x=start.x + lateral, y=start.y + depth), None


@route_pattern("texas", "angle")
def texas(start: Point, depth: float, direction: Optional[str]):
    side = sideline_sign(start)
    end = Point(x=start.x - 0.1 * side, y=start.y + depth * 0.6)
    return end, Point(x=start.x + 0.05 * side, y=start.y + depth * 0.2)


@route_pattern("whip")
def whip(start: Point, depth: float, direction: Optional[str]):
    side = sideline_sign(start)
    end = Point(x=start.x + 0.08 * side, y=start.y + depth * 0.7)
    return end, Point(x=start.x - 0.05 * side, y=start.y + depth * 0.5)


@route_pattern("bubble", "tunnel", "screen", "slip")
def bubble(start: Point, depth: float, direction: Optional[str]):
    return Point(x=start.x + 0.08 * sideline_sign(start), y=start.y + depth * 0.2), None


@route_pattern("seam", "divide")
def seam(start: Point, depth: float, direction: Optional[str]):
    return Point(x=start.x - 0.03 * sideline_sign(start), y=start.y + depth), None


@route_pattern("go")
def go(start: Point, depth: float, direction: Optional[str]):
    return Point(x=start.x, y=start.y + depth), None


def calculate_route_points(
    start: Point,
    pattern: str,
    depth: float,
    direction: Optional[str] = None
) -> Tuple[Point, Optional[Point]]:
    """Endpoint and optional control point for a pattern; unknown patterns run a go."""
    shape = ROUTE_PATTERNS.get(pattern, go)
    end, control = shape(start, depth, direction)
    return clamp_point(end), (clamp_point(control) if control is not None else None)
