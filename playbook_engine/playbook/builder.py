"""
Template action builder.

Converts a concept template plus a materialized roster into route and block
actions:
1. Walk template roles in order; each role claims every still-unassigned
   player matching one of its ``applies_to`` tokens
2. A claimed player gets the role's default route, or its default block when
   the role carries no route
3. Everyone left over (except QB and BALL) gets a fallback action

Every point emitted is clamped into the safe field bounds.
"""

import logging
from typing import List, Optional, Sequence, Set

from ..core.ids import IdFactory
from ..core.models import (
    Action, BlockAction, BlockAssignment, BlockDetail, BlockTarget,
    BuildResult, Concept, FieldSide, PathType, Player, RouteAction,
    RouteAssignment, RouteDetail
)
from ..geometry.blocks import calculate_block_end_point, resolve_play_side
from ..geometry.field import DEFAULT_ROUTE_DEPTH_YARDS, clamp_point, yards_to_field
from ..geometry.routes import calculate_route_points
from .fallback import assign_default_actions
from .matching import player_matches_any

logger = logging.getLogger("playbook_engine.builder")

# The ball marker shares the roster but is never a template target
UNMATCHABLE_ROLES = {"BALL"}

ROUTE_CURVE_TENSION = 0.5


def build_route_action(player: Player, assignment: RouteAssignment, ids: IdFactory) -> RouteAction:
    """Route from the player's alignment using the pattern registry."""
    start = clamp_point(player.alignment)
    depth_yards = assignment.depth if assignment.depth is not None else DEFAULT_ROUTE_DEPTH_YARDS
    end, control = calculate_route_points(
        start, assignment.pattern, yards_to_field(depth_yards), assignment.direction
    )

    points = [start, control, end] if control is not None else [start, end]
    return RouteAction(
        id=ids.new_id("action"),
        from_player_id=player.id,
        route=RouteDetail(
            pattern=assignment.pattern,
            depth=assignment.depth,
            control_points=points,
            path_type=PathType.TENSION if control is not None else PathType.STRAIGHT,
            tension=ROUTE_CURVE_TENSION if control is not None else 0.0,
        ),
    )


def build_block_action(
    player: Player,
    assignment: BlockAssignment,
    play_side: float,
    ids: IdFactory
) -> BlockAction:
    """Short block toward the scheme landmark on the play side."""
    start = clamp_point(player.alignment)
    end = calculate_block_end_point(start, assignment.scheme, play_side)
    return BlockAction(
        id=ids.new_id("action"),
        from_player_id=player.id,
        block=BlockDetail(
            scheme=assignment.scheme,
            target=BlockTarget(landmark=end),
            path_points=[start, end],
        ),
    )


def build_concept_actions(
    concept: Concept,
    players: Sequence[Player],
    ids: Optional[IdFactory] = None,
    strength_side: FieldSide = FieldSide.RIGHT
) -> BuildResult:
    """
    Build all actions for one concept against one roster.

    The roster is only read. Identical inputs (with a deterministic id
    factory) produce identical output.

    Args:
        concept: Catalog concept whose template drives the assignment
        players: Materialized roster for the play
        ids: Action id source (uuid based by default)
        strength_side: Formation strength, used to resolve the build policy side

    Returns:
        BuildResult with template actions first, then fallback actions
    """
    ids = ids or IdFactory()
    template = concept.template
    play_side = resolve_play_side(template.build_policy.default_side, strength_side)

    actions: List[Action] = []
    assigned: Set[str] = set()

    for role in template.roles:
        if role.default_route is None and role.default_block is None:
            continue

        for player in players:
            if player.id in assigned or player.role.upper() in UNMATCHABLE_ROLES:
                continue
            if not player_matches_any(player, role.applies_to):
                continue

            if role.default_route is not None:
                actions.append(build_route_action(player, role.default_route, ids))
            else:
                actions.append(build_block_action(player, role.default_block, play_side, ids))
            assigned.add(player.id)

    template_count = len(actions)
    actions.extend(assign_default_actions(players, assigned, concept.concept_type, play_side, ids))

    logger.debug(f"{concept.id}: {template_count} template actions, "
                 f"{len(actions) - template_count} fallback actions")
    return BuildResult(actions=actions, actions_created=len(actions))
