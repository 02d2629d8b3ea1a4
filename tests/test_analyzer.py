"""Test formation context analysis."""

import pytest
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from playbook_engine.core.models import FieldSide, Formation, FormationPlayer, Structure
from playbook_engine.core.registry import load_catalog
from playbook_engine.playbook.analyzer import analyze_formation, analyze_formation_key


def make_formation(slots, id="test_form"):
    """Build a formation from (role, label, x, y) tuples."""
    return Formation(
        id=id,
        name="Test Formation",
        players=[FormationPlayer(role=r, label=l, x=x, y=y) for r, l, x, y in slots]
    )


LINE = [
    ("C", "C", 0.5, -0.03),
    ("LG", "LG", 0.45, -0.03),
    ("RG", "RG", 0.55, -0.03),
    ("LT", "LT", 0.4, -0.03),
    ("RT", "RT", 0.6, -0.03),
    ("QB", "QB", 0.5, -0.07),
]


def test_i_formation_from_catalog():
    """Stacked FB and RB override the receiver shape to I."""
    catalog = load_catalog()
    context = analyze_formation(catalog.formations.get("i_formation"))

    assert context.receiver_count == 3
    assert context.personnel == "11"
    assert context.has_tight_end is True
    assert context.has_fullback is True
    assert context.structure == Structure.I_FORM


def test_two_receivers_is_2x2_and_12_personnel():
    formation = make_formation(LINE + [
        ("WR", "X", 0.1, -0.03),
        ("WR", "Z", 0.9, -0.03),
        ("RB", "RB", 0.5, -0.15),
    ])
    context = analyze_formation(formation)

    assert context.receiver_count == 2
    assert context.personnel == "12"
    assert context.structure == Structure.TWO_BY_TWO
    assert context.has_tight_end is False


def test_single_receiver_is_21_personnel():
    formation = make_formation(LINE + [
        ("TE", "Y", 0.62, -0.03),
        ("FB", "FB", 0.45, -0.12),
        ("RB", "RB", 0.6, -0.18),
    ])
    context = analyze_formation(formation)

    assert context.personnel == "21"
    # FB and RB more than 0.1 apart is not an I
    assert context.structure == Structure.TWO_BY_TWO


def test_three_receivers_is_trips():
    formation = make_formation(LINE + [
        ("WR", "X", 0.1, -0.03),
        ("WR", "H", 0.7, -0.03),
        ("WR", "Z", 0.9, -0.03),
        ("RB", "RB", 0.5, -0.15),
    ])
    assert analyze_formation(formation).structure == Structure.TRIPS


def test_four_receivers_split_by_half():
    """Four WRs are trips only with three on one side."""
    balanced = make_formation(LINE + [
        ("WR", "X", 0.1, -0.03),
        ("WR", "H", 0.3, -0.03),
        ("WR", "F", 0.7, -0.03),
        ("WR", "Z", 0.9, -0.03),
        ("RB", "RB", 0.5, -0.15),
    ])
    overloaded = make_formation(LINE + [
        ("WR", "X", 0.1, -0.03),
        ("WR", "H", 0.65, -0.03),
        ("WR", "F", 0.75, -0.03),
        ("WR", "Z", 0.9, -0.03),
        ("RB", "RB", 0.5, -0.15),
    ])

    assert analyze_formation(balanced).structure == Structure.TWO_BY_TWO
    assert analyze_formation(overloaded).structure == Structure.TRIPS


def test_no_backs_is_empty():
    formation = make_formation(LINE + [
        ("WR", "X", 0.1, -0.03),
        ("WR", "H", 0.3, -0.03),
        ("WR", "Z", 0.9, -0.03),
        ("TE", "Y", 0.62, -0.03),
    ])
    context = analyze_formation(formation)

    assert context.structure == Structure.EMPTY
    assert context.has_fullback is False


def test_strength_side_follows_receivers():
    left_heavy = make_formation(LINE + [
        ("WR", "X", 0.1, -0.03),
        ("WR", "H", 0.3, -0.03),
        ("WR", "Z", 0.9, -0.03),
        ("RB", "RB", 0.5, -0.15),
    ])
    balanced = make_formation(LINE + [
        ("WR", "X", 0.1, -0.03),
        ("WR", "Z", 0.9, -0.03),
        ("RB", "RB", 0.5, -0.15),
    ])

    assert analyze_formation(left_heavy).strength_side == FieldSide.LEFT
    assert analyze_formation(balanced).strength_side == FieldSide.RIGHT


def test_context_is_immutable():
    formation = make_formation(LINE + [("RB", "RB", 0.5, -0.15)])
    context = analyze_formation(formation)

    with pytest.raises(Exception):
        context.receiver_count = 5


def test_unknown_formation_key_returns_none():
    formations = {"known": make_formation(LINE + [("RB", "RB", 0.5, -0.15)], id="known")}

    assert analyze_formation_key("missing", formations) is None
    assert analyze_formation_key("known", formations) is not None


def test_every_catalog_formation_analyzes():
    catalog = load_catalog()
    for formation in catalog.formations.list():
        context = analyze_formation(formation)
        assert context.personnel in ("11", "12", "21")
        assert context.receiver_count >= 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
