"""Test playbook allocation."""

import pytest
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from playbook_engine.core.ids import SequentialIdFactory
from playbook_engine.core.models import (
    CategoryFilter, Concept, ConceptType, Formation, FormationPlayer,
    GeneratorConfig, PlaybookOptions
)
from playbook_engine.playbook.planner import (
    AllocationState, AllocationTargets, PlaybookGenerator,
    generate_plays_for_formations, get_generated_plays_stats
)


def make_formation(id, slots):
    return Formation(
        id=id,
        name=id.replace("_", " ").title(),
        players=[FormationPlayer(role=r, label=l, x=x, y=y) for r, l, x, y in slots]
    )


SPREAD = make_formation("spread", [
    ("C", "C", 0.5, -0.03),
    ("QB", "QB", 0.5, -0.15),
    ("RB", "RB", 0.55, -0.15),
    ("WR", "X", 0.1, -0.03),
    ("WR", "H", 0.7, -0.03),
    ("WR", "Z", 0.9, -0.03),
])

PRO = make_formation("pro", [
    ("C", "C", 0.5, -0.03),
    ("QB", "QB", 0.5, -0.07),
    ("TE", "Y", 0.62, -0.03),
    ("FB", "FB", 0.5, -0.13),
    ("RB", "RB", 0.5, -0.19),
    ("WR", "X", 0.1, -0.03),
    ("WR", "Z", 0.9, -0.03),
])

FORMATIONS = {"spread": SPREAD, "pro": PRO}

BUNCH = make_formation("bunch", [
    ("C", "C", 0.5, -0.03),
    ("QB", "QB", 0.5, -0.15),
    ("RB", "RB", 0.45, -0.15),
    ("WR", "X", 0.1, -0.03),
    ("WR", "H", 0.75, -0.06),
    ("WR", "Z", 0.8, -0.03),
])


def make_catalog(pass_count=16, run_count=16, pass_category="quick", run_category="inside_zone"):
    """Concepts with no requirements, all scoring the base 50."""
    concepts = []
    for i in range(pass_count):
        concepts.append(Concept(
            id=f"pass_{i}",
            name=f"Pass {i}",
            concept_type="pass",
            suggestion_hints={"pass_hints": {"category": pass_category}},
        ))
    for i in range(run_count):
        concepts.append(Concept(
            id=f"run_{i}",
            name=f"Run {i}",
            concept_type="run",
            suggestion_hints={"run_hints": {"category": run_category}},
        ))
    return concepts


def count_types(plays):
    passes = sum(1 for p in plays if p.concept.concept_type == ConceptType.PASS)
    return passes, len(plays) - passes


def test_balanced_playbook_two_formations():
    """30 plays at a 0.5 ratio across two formations splits roughly 15/15."""
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    plays = generator.generate(PlaybookOptions(formations=["spread", "pro"], target_play_count=30))

    passes, runs = count_types(plays)
    assert len(plays) == 30
    assert abs(passes - 15) <= 1
    assert abs(runs - 15) <= 1


def test_concepts_never_repeat():
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    plays = generator.generate(PlaybookOptions(formations=["spread", "pro"], target_play_count=30))

    concept_ids = [p.concept.id for p in plays]
    assert len(concept_ids) == len(set(concept_ids))


def test_output_sorted_by_score():
    concepts = make_catalog(pass_count=4, run_count=4)
    # One concept that fits the spread set better than the rest
    concepts.append(Concept(
        id="pass_trips_special",
        name="Trips Special",
        concept_type="pass",
        requirements={"min_eligible_receivers": 3, "preferred_structures": ["trips"]},
        suggestion_hints={"pass_hints": {"category": "quick"}},
    ))
    generator = PlaybookGenerator(FORMATIONS, concepts)
    plays = generator.generate(PlaybookOptions(formations=["spread"], target_play_count=6))

    scores = [p.score for p in plays]
    assert scores == sorted(scores, reverse=True)
    assert plays[0].concept.id == "pass_trips_special"
    assert plays[0].score == 90


def test_unknown_formation_contributes_nothing():
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    plays = generator.generate(PlaybookOptions(formations=["missing", "spread"], target_play_count=10))

    assert len(plays) == 10
    assert all(p.formation_key == "spread" for p in plays)


def test_only_unknown_formations_returns_empty():
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    assert generator.generate(PlaybookOptions(formations=["missing"], target_play_count=10)) == []


def test_no_formations_returns_empty():
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    assert generator.generate(PlaybookOptions(formations=[], target_play_count=10)) == []


def test_under_delivery_when_catalog_runs_out():
    generator = PlaybookGenerator(FORMATIONS, make_catalog(pass_count=2, run_count=1))
    plays = generator.generate(PlaybookOptions(formations=["spread", "pro"], target_play_count=10))

    assert len(plays) == 3


def test_fill_pass_tops_up_shortfall():
    """Type quotas leave gaps that the fill pass covers from the other type."""
    generator = PlaybookGenerator(FORMATIONS, make_catalog(pass_count=10, run_count=2))
    plays = generator.generate(PlaybookOptions(formations=["spread"], target_play_count=8, pass_run_ratio=0.5))

    passes, runs = count_types(plays)
    assert len(plays) == 8
    assert runs == 2
    assert passes == 6


def test_non_viable_concepts_excluded():
    concepts = make_catalog(pass_count=3, run_count=3)
    concepts.append(Concept(
        id="pass_needs_te",
        name="Needs TE",
        concept_type="pass",
        requirements={"needs_te": True},
        suggestion_hints={"pass_hints": {"category": "quick"}},
    ))
    generator = PlaybookGenerator(FORMATIONS, concepts)
    plays = generator.generate(PlaybookOptions(formations=["spread"], target_play_count=20))

    assert "pass_needs_te" not in {p.concept.id for p in plays}
    assert len(plays) == 6


def test_concept_reuse_policy():
    """With reuse enabled a concept can appear once per formation."""
    config = GeneratorConfig(allow_concept_reuse=True)
    generator = PlaybookGenerator(FORMATIONS, make_catalog(pass_count=2, run_count=1), config=config)
    plays = generator.generate(PlaybookOptions(formations=["spread", "pro"], target_play_count=10))

    pairs = [(p.formation_key, p.concept.id) for p in plays]
    assert len(plays) == 6
    assert len(pairs) == len(set(pairs))


def test_category_filter_restricts_candidates():
    concepts = make_catalog(pass_count=4, run_count=4)
    concepts.append(Concept(
        id="pass_deep",
        name="Deep",
        concept_type="pass",
        suggestion_hints={"pass_hints": {"category": "deep"}},
    ))
    options = PlaybookOptions(
        formations=["spread"],
        target_play_count=20,
        include_categories=CategoryFilter(pass_categories=["deep"]),
    )
    plays = PlaybookGenerator(FORMATIONS, concepts).generate(options)

    pass_ids = {p.concept.id for p in plays if p.concept.concept_type == ConceptType.PASS}
    run_ids = {p.concept.id for p in plays if p.concept.concept_type == ConceptType.RUN}
    assert pass_ids == {"pass_deep"}
    # Empty run list leaves runs unrestricted
    assert len(run_ids) == 4


def test_category_filter_accepts_aliases():
    options = PlaybookOptions(
        formations=["spread"],
        include_categories={"pass": ["quick"], "run": ["gap"]},
    )
    assert options.include_categories.pass_categories == ["quick"]
    assert options.include_categories.run_categories == ["gap"]


def test_allocate_formation_in_isolation():
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    options = PlaybookOptions(formations=["spread", "pro"], target_play_count=30)
    targets = AllocationTargets.from_options(options, 2)

    state = generator.allocate_formation(AllocationState(), "spread", generator.concepts, targets)

    assert targets.plays_per_formation == 15
    assert state.pass_added == 8
    assert state.run_added == 7
    assert len(state.used_keys) == 15

    # Input state is untouched
    empty = AllocationState()
    generator.allocate_formation(empty, "spread", generator.concepts, targets)
    assert empty.plays == ()


def test_late_formations_rebalance_toward_short_type():
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    options = PlaybookOptions(formations=["spread", "pro"], target_play_count=10, pass_run_ratio=0.5)
    targets = AllocationTargets.from_options(options, 2)

    state = AllocationState(pass_added=5, run_added=0)
    state = generator.allocate_formation(state, "pro", generator.concepts, targets)

    assert state.pass_added == 5
    assert state.run_added == 5


def test_uneven_split_never_exceeds_target():
    """10 plays over three formations: per-formation quotas of 4 are cut on the last one."""
    formations = dict(FORMATIONS, bunch=BUNCH)
    generator = PlaybookGenerator(formations, make_catalog())
    plays = generator.generate(PlaybookOptions(formations=["spread", "pro", "bunch"], target_play_count=10))

    passes, runs = count_types(plays)
    assert len(plays) == 10
    assert (passes, runs) == (5, 5)
    assert sum(1 for p in plays if p.formation_key == "bunch") == 2


def test_quota_capped_by_remaining_target():
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    options = PlaybookOptions(formations=["spread", "pro"], target_play_count=10)
    targets = AllocationTargets.from_options(options, 2)

    state = generator.allocate_formation(AllocationState(), "spread", generator.concepts, targets)
    state = generator.allocate_formation(state, "pro", generator.concepts, targets)
    assert len(state.plays) == 10

    # Target already met: a further formation adds nothing
    full = generator.allocate_formation(state, "spread", generator.concepts, targets)
    assert full.plays == state.plays


def test_sequential_ids_and_names():
    generator = PlaybookGenerator(FORMATIONS, make_catalog(pass_count=1, run_count=1),
                                  id_factory=SequentialIdFactory())
    plays = generator.generate(PlaybookOptions(formations=["spread"], target_play_count=2))

    assert sorted(p.id for p in plays) == ["play_1", "play_2"]
    assert {p.name for p in plays} == {"Spread Pass 0", "Spread Run 0"}
    assert all(p.selected for p in plays)


def test_ratio_converges_with_larger_targets():
    concepts = make_catalog(pass_count=80, run_count=80)
    generator = PlaybookGenerator(FORMATIONS, concepts)

    for ratio in (0.3, 0.7):
        plays = generator.generate(PlaybookOptions(
            formations=["spread", "pro"], target_play_count=100, pass_run_ratio=ratio
        ))
        passes, _ = count_types(plays)
        assert abs(passes / len(plays) - ratio) <= 0.05


def test_invalid_options_rejected():
    with pytest.raises(ValueError):
        PlaybookOptions(formations=["spread"], pass_run_ratio=1.5)
    with pytest.raises(ValueError):
        PlaybookOptions(formations=["spread"], target_play_count=0)


def test_stats_summary():
    generator = PlaybookGenerator(FORMATIONS, make_catalog())
    plays = generator.generate(PlaybookOptions(formations=["spread", "pro"], target_play_count=10))
    plays[0].selected = False

    stats = get_generated_plays_stats(plays)

    assert stats.total == 10
    assert stats.selected == 9
    assert stats.pass_plays + stats.run_plays == 9
    assert sum(stats.formation_counts.values()) == 9
    assert stats.pass_run_ratio == pytest.approx(stats.pass_plays / 9)


def test_stats_empty():
    stats = get_generated_plays_stats([])
    assert stats.total == 0
    assert stats.pass_run_ratio == 0


def test_generate_against_catalog():
    plays = generate_plays_for_formations(
        PlaybookOptions(formations=["shotgun", "i_formation", "trips"], target_play_count=20)
    )

    assert 0 < len(plays) <= 20
    assert len({p.concept.id for p in plays}) == len(plays)
    assert all(p.score >= 40 for p in plays)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
