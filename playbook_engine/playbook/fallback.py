"""
Default assignment fallback.

Gives every player the template pass left untouched exactly one action,
chosen by coarse position class and by whether the concept is a pass or run.
QB and BALL never receive a fallback action.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Set

from ..core.ids import IdFactory
from ..core.models import (
    Action, BlockAction, BlockDetail, BlockTarget, ConceptType, PathType,
    Player, Point, RouteAction, RouteDetail
)
from ..geometry.field import clamp_point, offset, sideline_sign
from .matching import Capability, player_capabilities

SKIPPED_TOKENS = {"QB", "BALL"}


class PositionClass(str, Enum):
    LINE = "line"
    TIGHT_END = "tight_end"
    FULLBACK = "fullback"
    RECEIVER = "receiver"
    RUNNING_BACK = "running_back"


# Checked in order; the first class whose tags a player carries wins
POSITION_CLASSES = [
    (PositionClass.LINE, {Capability.LINEMAN}),
    (PositionClass.TIGHT_END, {Capability.TIGHT_END}),
    (PositionClass.FULLBACK, {Capability.FULLBACK}),
    (PositionClass.RECEIVER, {Capability.RECEIVER, Capability.WINGBACK}),
    (PositionClass.RUNNING_BACK, {Capability.RUNNING_BACK}),
]


def is_skipped(player: Player) -> bool:
    """QB (by role or label) and the BALL marker never get actions."""
    return player.role.upper() in SKIPPED_TOKENS or (player.label or "").upper() == "QB"


def classify_player(player: Player) -> PositionClass:
    """Coarse position class; unrecognized positions are treated as receivers."""
    tags = player_capabilities(player)
    for position_class, required in POSITION_CLASSES:
        if tags & required:
            return position_class
    return PositionClass.RECEIVER


def _route(player: Player, ids: IdFactory, pattern: str, depth: float,
           points: List[Point], tension: float = 0.0) -> RouteAction:
    return RouteAction(
        id=ids.new_id("action"),
        from_player_id=player.id,
        route=RouteDetail(
            pattern=pattern,
            depth=depth,
            control_points=[clamp_point(p) for p in points],
            path_type=PathType.TENSION if len(points) > 2 else PathType.STRAIGHT,
            tension=tension,
        ),
    )


def _block(player: Player, ids: IdFactory, scheme: str, start: Point, end: Point) -> BlockAction:
    start, end = clamp_point(start), clamp_point(end)
    return BlockAction(
        id=ids.new_id("action"),
        from_player_id=player.id,
        block=BlockDetail(
            scheme=scheme,
            target=BlockTarget(landmark=end),
            path_points=[start, end],
        ),
    )


def _line_action(player: Player, start: Point, is_pass: bool, play_side: float, ids: IdFactory) -> Action:
    return _block(player, ids, "zone_step", start, offset(start, 0.0, 0.05))


def _tight_end_action(player: Player, start: Point, is_pass: bool, play_side: float, ids: IdFactory) -> Action:
    if is_pass:
        end = offset(start, 0.1 * sideline_sign(start), 0.05)
        return _route(player, ids, "flat", 3, [start, end])
    return _block(player, ids, "zone_step", start, offset(start, 0.0, 0.05))


def _fullback_action(player: Player, start: Point, is_pass: bool, play_side: float, ids: IdFactory) -> Action:
    if is_pass:
        end = offset(start, 0.05 * sideline_sign(start), 0.03)
        return _route(player, ids, "flat", 2, [start, end])
    return _block(player, ids, "lead", start, offset(start, 0.0, 0.1))


def _receiver_action(player: Player, start: Point, is_pass: bool, play_side: float, ids: IdFactory) -> Action:
    if is_pass:
        return _route(player, ids, "go", 15, [start, offset(start, 0.0, 0.2)])
    end = offset(start, -0.05 * sideline_sign(start), 0.08)
    return _block(player, ids, "stalk", start, end)


def _running_back_action(player: Player, start: Point, is_pass: bool, play_side: float, ids: IdFactory) -> Action:
    if is_pass:
        end = offset(start, 0.08 * sideline_sign(start), 0.05)
        return _route(player, ids, "swing", 3, [start, end])
    control = offset(start, 0.0, 0.08)
    end = offset(start, 0.05 * play_side, 0.15)
    return _route(player, ids, "go", 15, [start, control, end], tension=0.3)


FallbackRule = Callable[[Player, Point, bool, float, IdFactory], Action]

FALLBACK_RULES: Dict[PositionClass, FallbackRule] = {
    PositionClass.LINE: _line_action,
    PositionClass.TIGHT_END: _tight_end_action,
    PositionClass.FULLBACK: _fullback_action,
    PositionClass.RECEIVER: _receiver_action,
    PositionClass.RUNNING_BACK: _running_back_action,
}


def assign_default_actions(
    players: Sequence[Player],
    assigned_ids: Set[str],
    concept_type: ConceptType,
    play_side: float = 1.0,
    ids: Optional[IdFactory] = None
) -> List[Action]:
    """
    Build one fallback action for each unassigned, non-QB, non-BALL player.

    Args:
        players: Play roster in roster order
        assigned_ids: Ids of players already given a template action
        concept_type: Pass concepts get routes for skill players, run concepts blocks
        play_side: Lateral sign of the play side (+1 right, -1 left)
        ids: Action id source

    Returns:
        Fallback actions in roster order
    """
    ids = ids or IdFactory()
    is_pass = concept_type == ConceptType.PASS
    actions: List[Action] = []

    for player in players:
        if player.id in assigned_ids or is_skipped(player):
            continue
        start = clamp_point(player.alignment)
        rule = FALLBACK_RULES[classify_player(player)]
        actions.append(rule(player, start, is_pass, play_side, ids))

    return actions
