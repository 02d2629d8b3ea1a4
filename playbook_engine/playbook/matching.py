"""
Capability-tag matching between template roles and roster players.

Every position token (a player's role or label, or an entry of a template
role's ``applies_to``) maps to a capability tag. A player offers the tags of
its role and label plus any group tag those imply (an X is also a receiver);
a template token asks for its own tag only. A player matches when the two
sets intersect, or when the token equals its role or label exactly.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable

from ..core.models import Player


class Capability(str, Enum):
    SPLIT_END = "split_end"
    FLANKER = "flanker"
    SLOT = "slot"
    FLEX = "flex"
    RECEIVER = "receiver"
    TIGHT_END = "tight_end"
    RUNNING_BACK = "running_back"
    FULLBACK = "fullback"
    WINGBACK = "wingback"
    QUARTERBACK = "quarterback"
    CENTER = "center"
    LEFT_GUARD = "left_guard"
    RIGHT_GUARD = "right_guard"
    LEFT_TACKLE = "left_tackle"
    RIGHT_TACKLE = "right_tackle"
    LINEMAN = "lineman"


TOKEN_CAPABILITY: Dict[str, Capability] = {
    "X": Capability.SPLIT_END,
    "FL": Capability.SPLIT_END,
    "Z": Capability.FLANKER,
    "SE": Capability.FLANKER,
    "H": Capability.SLOT,
    "SLOT": Capability.SLOT,
    "F": Capability.FLEX,
    "WR": Capability.RECEIVER,
    "Y": Capability.TIGHT_END,
    "TE": Capability.TIGHT_END,
    "U": Capability.TIGHT_END,
    "RB": Capability.RUNNING_BACK,
    "TB": Capability.RUNNING_BACK,
    "HB": Capability.RUNNING_BACK,
    "B": Capability.RUNNING_BACK,
    "TAIL": Capability.RUNNING_BACK,
    "FB": Capability.FULLBACK,
    "FULL": Capability.FULLBACK,
    "WB": Capability.WINGBACK,
    "WING": Capability.WINGBACK,
    "QB": Capability.QUARTERBACK,
    "C": Capability.CENTER,
    "LG": Capability.LEFT_GUARD,
    "RG": Capability.RIGHT_GUARD,
    "LT": Capability.LEFT_TACKLE,
    "RT": Capability.RIGHT_TACKLE,
    "OL": Capability.LINEMAN,
}

# Tags a specific position also carries for generic requests ("WR", "OL")
IMPLIED_CAPABILITIES: Dict[Capability, FrozenSet[Capability]] = {
    Capability.SPLIT_END: frozenset({Capability.RECEIVER}),
    Capability.FLANKER: frozenset({Capability.RECEIVER}),
    Capability.SLOT: frozenset({Capability.RECEIVER}),
    Capability.FLEX: frozenset({Capability.RECEIVER}),
    Capability.CENTER: frozenset({Capability.LINEMAN}),
    Capability.LEFT_GUARD: frozenset({Capability.LINEMAN}),
    Capability.RIGHT_GUARD: frozenset({Capability.LINEMAN}),
    Capability.LEFT_TACKLE: frozenset({Capability.LINEMAN}),
    Capability.RIGHT_TACKLE: frozenset({Capability.LINEMAN}),
}

# "F" is read as either the flex receiver or the fullback
REQUIRED_OVERRIDES: Dict[str, FrozenSet[Capability]] = {
    "F": frozenset({Capability.FLEX, Capability.FULLBACK}),
}


def _tokens(player: Player) -> FrozenSet[str]:
    return frozenset(t.upper() for t in (player.role, player.label) if t)


def capabilities_for_tokens(tokens: Iterable[str]) -> FrozenSet[Capability]:
    """All tags offered by a set of position tokens."""
    tags = set()
    for token in tokens:
        capability = TOKEN_CAPABILITY.get(token.upper())
        if capability is None:
            continue
        tags.add(capability)
        tags |= IMPLIED_CAPABILITIES.get(capability, frozenset())
    return frozenset(tags)


def player_capabilities(player: Player) -> FrozenSet[Capability]:
    return capabilities_for_tokens(_tokens(player))


def required_capabilities(token: str) -> FrozenSet[Capability]:
    """Tags that satisfy a template token; empty for unknown tokens."""
    token = token.upper()
    if token in REQUIRED_OVERRIDES:
        return REQUIRED_OVERRIDES[token]
    capability = TOKEN_CAPABILITY.get(token)
    return frozenset({capability}) if capability else frozenset()


def player_matches_role(player: Player, token: str) -> bool:
    """Check if a player satisfies one ``applies_to`` token."""
    if token.upper() in _tokens(player):
        return True
    return bool(player_capabilities(player) & required_capabilities(token))


def player_matches_any(player: Player, applies_to: Iterable[str]) -> bool:
    return any(player_matches_role(player, token) for token in applies_to)
