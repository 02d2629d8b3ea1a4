"""Formation context analysis for concept matching."""

import logging
from typing import Mapping, Optional, Sequence

from ..core.models import FieldSide, Formation, FormationContext, FormationPlayer, Structure

logger = logging.getLogger("playbook_engine.analyzer")

RECEIVER_ROLES = {"WR", "TE"}

# Horizontal thresholds used to split receivers into left / right groups
LEFT_HALF_MAX_X = 0.4
RIGHT_HALF_MIN_X = 0.6

# FB and RB closer than this horizontally are stacked (I formation)
STACK_TOLERANCE_X = 0.1


def _personnel_for(receiver_count: int) -> str:
    if receiver_count >= 3:
        return "11"
    if receiver_count >= 2:
        return "12"
    return "21"


def _classify_structure(players: Sequence[FormationPlayer]) -> Structure:
    wrs = [p for p in players if p.role == "WR"]
    structure = Structure.TWO_BY_TWO

    if len(wrs) >= 4:
        left = sum(1 for w in wrs if w.x < LEFT_HALF_MAX_X)
        right = sum(1 for w in wrs if w.x > RIGHT_HALF_MIN_X)
        structure = Structure.TRIPS if left >= 3 or right >= 3 else Structure.TWO_BY_TWO
    elif len(wrs) == 3:
        structure = Structure.TRIPS

    fb = next((p for p in players if p.role == "FB"), None)
    rb = next((p for p in players if p.role == "RB"), None)

    if rb is None and fb is None:
        structure = Structure.EMPTY

    if fb is not None and rb is not None and abs(fb.x - rb.x) < STACK_TOLERANCE_X:
        structure = Structure.I_FORM

    return structure


def _strength_side(players: Sequence[FormationPlayer]) -> FieldSide:
    receivers = [p for p in players if p.role in RECEIVER_ROLES]
    left = sum(1 for p in receivers if p.x < 0.5)
    right = sum(1 for p in receivers if p.x > 0.5)
    return FieldSide.LEFT if left > right else FieldSide.RIGHT


def analyze_formation(formation: Formation) -> FormationContext:
    """Derive personnel, receiver count, backfield and shape from a formation."""
    players = formation.players
    receiver_count = sum(1 for p in players if p.role in RECEIVER_ROLES)

    return FormationContext(
        personnel=_personnel_for(receiver_count),
        receiver_count=receiver_count,
        has_tight_end=any(p.role == "TE" for p in players),
        has_fullback=any(p.role == "FB" for p in players),
        structure=_classify_structure(players),
        strength_side=_strength_side(players),
    )


def analyze_formation_key(
    formation_key: str,
    formations: Mapping[str, Formation]
) -> Optional[FormationContext]:
    """Context for a catalog formation, or None if the key is unknown."""
    formation = formations.get(formation_key)
    if formation is None:
        logger.warning(f"Formation not found in catalog: {formation_key}")
        return None
    return analyze_formation(formation)
