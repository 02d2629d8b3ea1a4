"""
Play document materialization.

Expands a reviewed GeneratedPlay into a full play document: a roster with
fresh player ids, the built actions, the BALL placed on the ball carrier's
path, and meta / tags / notes for the persistence layer.
"""

import logging
import traceback
from typing import List, Mapping, Optional, Sequence

from ..core.ids import Clock, IdFactory, utc_now
from ..core.models import (
    Action, Appearance, Concept, ConceptType, Formation, GeneratedPlay,
    PlayDocument, PlayMeta, PlayNotes, Player, Point, RouteAction
)
from ..geometry.field import clamp_point
from .analyzer import analyze_formation
from .builder import build_concept_actions

logger = logging.getLogger("playbook_engine.document")

# Fraction of the carrier's first route segment where the ball is drawn
BALL_SEGMENT_FRACTION = 0.2
# Ball offset in front of a carrier with no route
BALL_HANDOFF_OFFSET_Y = 0.02

QB_RUN_KEYWORDS = ["qb_power", "qb_draw", "qb_sneak", "read_option", "speed_option", "midline"]
MOTION_CARRY_KEYWORDS = ["jet_sweep", "fly_sweep", "end_around", "reverse"]
FB_CARRY_KEYWORDS = ["fb_dive"]

SLOT_CARRIER_LABELS = {"H", "F", "SLOT"}


class FormationNotFoundError(LookupError):
    """Raised when a play references a formation missing from the catalog."""
    pass


def _mentions(concept: Concept, keywords: Sequence[str]) -> bool:
    concept_id = concept.id.lower()
    concept_name = concept.name.lower()
    return any(k in concept_id or k.replace("_", " ") in concept_name for k in keywords)


def get_ball_carrier_role(concept: Concept) -> str:
    """Role or label of the player who ends up with the ball."""
    if concept.concept_type == ConceptType.PASS:
        return "QB"
    if _mentions(concept, QB_RUN_KEYWORDS):
        return "QB"
    if _mentions(concept, MOTION_CARRY_KEYWORDS):
        return "H"
    if _mentions(concept, FB_CARRY_KEYWORDS):
        return "FB"
    return "RB"


def find_ball_carrier(players: Sequence[Player], carrier_role: str) -> Optional[Player]:
    """Match by role, then label, then any slot receiver for H; QB as last resort."""
    wanted = carrier_role.upper()
    carrier = next((p for p in players if p.role.upper() == wanted), None)
    if carrier is None:
        carrier = next((p for p in players if (p.label or "").upper() == wanted), None)
    if carrier is None and wanted in ("H", "SLOT"):
        carrier = next(
            (p for p in players if p.role == "WR" and (p.label or "").upper() in SLOT_CARRIER_LABELS),
            None,
        )
    if carrier is None:
        carrier = next((p for p in players if p.role == "QB"), None)
    return carrier


def materialize_roster(formation: Formation, ids: IdFactory) -> List[Player]:
    """Catalog formation slots -> roster players with fresh ids."""
    return [
        Player(
            id=ids.new_id("player"),
            role=slot.role,
            label=slot.label,
            alignment=Point(x=slot.x, y=slot.y),
            appearance=slot.appearance.model_copy() if slot.appearance else Appearance(),
        )
        for slot in formation.players
    ]


def place_ball(players: Sequence[Player], actions: Sequence[Action], carrier_role: str) -> None:
    """Move the BALL marker onto the carrier's path (roster is this play's own copy)."""
    ball = next((p for p in players if p.role == "BALL"), None)
    if ball is None:
        return
    carrier = find_ball_carrier(players, carrier_role)
    if carrier is None:
        return

    route = next(
        (a for a in actions if isinstance(a, RouteAction) and a.from_player_id == carrier.id),
        None,
    )
    if route is not None:
        start, end = route.route.control_points[0], route.route.control_points[1]
        position = Point(
            x=start.x + (end.x - start.x) * BALL_SEGMENT_FRACTION,
            y=start.y + (end.y - start.y) * BALL_SEGMENT_FRACTION,
        )
    else:
        position = Point(x=carrier.alignment.x, y=carrier.alignment.y + BALL_HANDOFF_OFFSET_Y)

    ball.alignment = clamp_point(position)


def build_play_document(
    generated_play: GeneratedPlay,
    formations: Mapping[str, Formation],
    ids: Optional[IdFactory] = None,
    clock: Clock = utc_now
) -> PlayDocument:
    """
    Materialize one generated play into a play document.

    Args:
        generated_play: Reviewed play from the allocation planner
        formations: Formation lookup keyed by formation id
        ids: Player/action id source
        clock: Timestamp source for created_at / updated_at

    Returns:
        PlayDocument ready for persistence

    Raises:
        FormationNotFoundError: If the play's formation is not in the lookup
    """
    ids = ids or IdFactory()
    formation = formations.get(generated_play.formation_key)
    if formation is None:
        logger.error(f"Formation not found: {generated_play.formation_key}")
        raise FormationNotFoundError(f"Formation not found: {generated_play.formation_key}")

    concept = generated_play.concept
    context = analyze_formation(formation)
    players = materialize_roster(formation, ids)

    actions: List[Action] = []
    try:
        actions = build_concept_actions(concept, players, ids, context.strength_side).actions
    except Exception:
        # The play is still emitted, just without geometry
        logger.error(f"Error building actions for {concept.id} in {formation.id}: "
                     f"{traceback.format_exc()}")

    place_ball(players, actions, get_ball_carrier_role(concept))

    now = clock().isoformat()
    personnel = (concept.requirements.personnel_hints or ["11"])[0]

    return PlayDocument(
        id=generated_play.id,
        name=generated_play.name,
        description=concept.summary,
        tags=[concept.concept_type.value] + list(concept.badges),
        meta=PlayMeta(
            personnel=personnel,
            formation_name=generated_play.formation_name,
            concept_name=concept.name,
            concept_id=concept.id,
            strength=context.strength_side,
        ),
        roster=players,
        actions=actions,
        notes=PlayNotes(
            call_name=generated_play.name,
            coaching_points=list(generated_play.rationale),
        ),
        created_at=now,
        updated_at=now,
    )


def build_play_documents(
    plays: Sequence[GeneratedPlay],
    formations: Mapping[str, Formation],
    ids: Optional[IdFactory] = None,
    clock: Clock = utc_now
) -> List[PlayDocument]:
    """Materialize the selected plays, in order."""
    return [
        build_play_document(play, formations, ids, clock)
        for play in plays
        if play.selected
    ]
