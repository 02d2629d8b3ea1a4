"""Validation functions for materialized play invariants."""

from collections import Counter
from typing import List, Sequence
from .models import Action, BlockAction, Concept, Formation, PlayDocument, Player, Point, RouteAction
from ..geometry.field import MIN_X, MAX_X, MIN_Y, MAX_Y


class ValidationError(Exception):
    """Custom validation error."""
    pass


def _needs_action(player: Player) -> bool:
    return player.role.upper() not in ("QB", "BALL") and (player.label or "").upper() != "QB"


def _action_points(action: Action) -> List[Point]:
    if isinstance(action, RouteAction):
        return list(action.route.control_points)
    if isinstance(action, BlockAction):
        return list(action.block.path_points) + [action.block.target.landmark]
    return []


def validate_formation(formation: Formation) -> None:
    """
    Validate formation invariants:
    - Exactly one BALL marker at most
    - Alignments inside the safe bounds
    """
    balls = sum(1 for p in formation.players if p.role == "BALL")
    if balls > 1:
        raise ValidationError(f"Formation {formation.id} has {balls} BALL markers")

    for slot in formation.players:
        if not (MIN_X <= slot.x <= MAX_X and MIN_Y <= slot.y <= MAX_Y):
            raise ValidationError(
                f"Formation {formation.id} {slot.label or slot.role} aligned out of bounds "
                f"({slot.x}, {slot.y})"
            )


def validate_concept(concept: Concept) -> None:
    """
    Validate concept invariants:
    - Role names unique within the template
    - Every role carrying an action targets at least one position
    """
    names = Counter(role.role_name for role in concept.template.roles)
    duplicates = [name for name, count in names.items() if count > 1]
    if duplicates:
        raise ValidationError(f"Concept {concept.id} has duplicate roles {duplicates}")

    for role in concept.template.roles:
        has_action = role.default_route is not None or role.default_block is not None
        if has_action and not role.applies_to:
            raise ValidationError(f"Concept {concept.id} role {role.role_name} applies to nobody")


def validate_actions(players: Sequence[Player], actions: Sequence[Action]) -> None:
    """
    Validate action invariants against a roster:
    - Every action starts from a roster player
    - No player owns more than one action
    - Every player except QB / BALL owns exactly one action
    - Every point lies inside the safe bounds
    """
    player_ids = {p.id for p in players}
    owners = Counter(a.from_player_id for a in actions)

    for action in actions:
        if action.from_player_id not in player_ids:
            raise ValidationError(f"Action {action.id} references unknown player {action.from_player_id}")

        for point in _action_points(action):
            if not (MIN_X <= point.x <= MAX_X and MIN_Y <= point.y <= MAX_Y):
                raise ValidationError(
                    f"Action {action.id} point ({point.x:.3f}, {point.y:.3f}) out of bounds"
                )

    for player_id, count in owners.items():
        if count > 1:
            raise ValidationError(f"Player {player_id} has {count} actions")

    for player in players:
        if _needs_action(player) and player.id not in owners:
            raise ValidationError(f"Player {player.id} ({player.label or player.role}) has no action")


def validate_play_document(document: PlayDocument) -> None:
    """
    Validate a materialized play.

    A document whose action build failed (no actions at all) is allowed
    through; otherwise the full action invariants must hold.
    """
    if len({p.id for p in document.roster}) != len(document.roster):
        raise ValidationError(f"Play {document.id} has duplicate player ids")

    if document.actions:
        validate_actions(document.roster, document.actions)
