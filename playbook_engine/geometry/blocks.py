"""Block scheme registry and play-side resolution."""

from typing import Dict, Tuple

from ..core.models import DefaultSide, FieldSide, Point
from .field import offset

# scheme -> (lateral offset toward the play side, forward offset)
BLOCK_SCHEMES: Dict[str, Tuple[float, float]] = {
    "pull_kick": (0.15, 0.1),
    "pull_lead": (0.15, 0.1),
    "reach": (0.05, 0.03),
    "trap": (0.1, 0.08),
    "wham": (0.1, 0.08),
    "arc": (0.12, 0.1),
    "crack": (-0.05, 0.08),
    "stalk": (-0.05, 0.08),
    "lead": (0.0, 0.1),
    "iso": (0.0, 0.1),
    "insert": (0.0, 0.1),
    "down": (0.03, 0.05),
    "kick": (0.03, 0.05),
    "zone_step": (0.0, 0.05),
    "combo": (0.0, 0.05),
    "climb": (0.0, 0.05),
    "scoop": (0.0, 0.05),
}

# zone_step / combo / climb / scoop and any unlisted scheme
DEFAULT_BLOCK_STEP = (0.0, 0.05)


def resolve_play_side(default_side: DefaultSide, strength_side: FieldSide = FieldSide.RIGHT) -> float:
    """
    Lateral sign (+1 right, -1 left) for a build policy's default side.

    ``strength`` and ``field`` follow the formation strength, ``boundary``
    goes away from it.
    """
    strength_sign = 1.0 if strength_side == FieldSide.RIGHT else -1.0
    if default_side == DefaultSide.RIGHT:
        return 1.0
    if default_side == DefaultSide.LEFT:
        return -1.0
    if default_side == DefaultSide.BOUNDARY:
        return -strength_sign
    return strength_sign


def calculate_block_end_point(start: Point, scheme: str, play_side: float) -> Point:
    """Short directional landmark for a block, clamped into the safe bounds."""
    lateral, forward = BLOCK_SCHEMES.get(scheme, DEFAULT_BLOCK_STEP)
    return offset(start, lateral * play_side, forward)
