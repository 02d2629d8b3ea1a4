"""
Playbook allocation planner.

Given a set of formations, allocates a balanced set of plays by matching
concepts that fit each formation:
1. Score every still-unused concept against each formation in order
2. Take a per-formation pass/run quota, rebalancing toward whichever type
   is still short of its global target
3. Fill any shortfall from the remaining viable concepts
4. Sort the result by score, best first

The used-concept set and running totals are carried in an immutable
``AllocationState`` that each step returns, so formations can be allocated
and tested in isolation.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import FrozenSet, List, Mapping, Optional, Sequence, Tuple

from ..core.ids import IdFactory
from ..core.models import (
    CategoryFilter, Concept, ConceptType, Formation, GeneratedPlay,
    GeneratorConfig, PlaybookOptions, PlaybookStats
)
from ..core.registry import load_catalog
from .analyzer import analyze_formation_key
from .scoring import ConceptScore, score_concept

logger = logging.getLogger("playbook_engine.planner")


@dataclass(frozen=True)
class AllocationTargets:
    """Quotas derived once per generation run."""
    target_play_count: int
    pass_run_ratio: float
    plays_per_formation: int
    target_pass_plays: int
    target_run_plays: int

    @classmethod
    def from_options(cls, options: PlaybookOptions, formation_count: int) -> "AllocationTargets":
        target = options.target_play_count
        ratio = options.pass_run_ratio
        target_pass = math.ceil(target * ratio)
        return cls(
            target_play_count=target,
            pass_run_ratio=ratio,
            plays_per_formation=math.ceil(target / formation_count),
            target_pass_plays=target_pass,
            target_run_plays=target - target_pass,
        )


@dataclass(frozen=True)
class AllocationState:
    """Accumulator threaded through the allocation passes."""
    plays: Tuple[GeneratedPlay, ...] = ()
    used_keys: FrozenSet[str] = field(default_factory=frozenset)
    pass_added: int = 0
    run_added: int = 0

    def with_play(self, play: GeneratedPlay, usage_key: str) -> "AllocationState":
        is_pass = play.concept.concept_type == ConceptType.PASS
        return replace(
            self,
            plays=self.plays + (play,),
            used_keys=self.used_keys | {usage_key},
            pass_added=self.pass_added + (1 if is_pass else 0),
            run_added=self.run_added + (0 if is_pass else 1),
        )


@dataclass
class ScoredConcept:
    concept: Concept
    result: ConceptScore


def _matches_categories(concept: Concept, categories: Optional[CategoryFilter]) -> bool:
    if categories is None:
        return True
    allowed = (categories.pass_categories if concept.concept_type == ConceptType.PASS
               else categories.run_categories)
    return not allowed or concept.category in allowed


class PlaybookGenerator:
    """
    Allocates catalog concepts across a set of formations.

    The generator only reads its formation lookup and concept catalog;
    every call to ``generate`` starts from a fresh AllocationState.
    """

    def __init__(
        self,
        formations: Mapping[str, Formation],
        concepts: Sequence[Concept],
        config: Optional[GeneratorConfig] = None,
        id_factory: Optional[IdFactory] = None
    ):
        self.formations = formations
        self.concepts = list(concepts)
        self.config = config or GeneratorConfig()
        self.ids = id_factory or IdFactory()

    def generate(self, options: PlaybookOptions) -> List[GeneratedPlay]:
        """
        Generate a balanced set of plays for the given formations.

        Returns fewer than ``target_play_count`` plays when the catalog runs
        out of viable concepts; callers must check the returned length.
        """
        if not options.formations:
            logger.warning("No formations requested; nothing to generate")
            return []

        targets = AllocationTargets.from_options(options, len(options.formations))
        candidates = [c for c in self.concepts if _matches_categories(c, options.include_categories)]

        state = AllocationState()
        for formation_key in options.formations:
            state = self.allocate_formation(state, formation_key, candidates, targets)

        if len(state.plays) < targets.target_play_count:
            state = self.fill_shortfall(state, options.formations, candidates, targets)

        if len(state.plays) < targets.target_play_count:
            logger.info(f"Generated {len(state.plays)} of {targets.target_play_count} requested plays; "
                        f"no further viable concepts")

        # sorted() is stable, so equal scores keep allocation order
        return sorted(state.plays, key=lambda p: p.score, reverse=True)

    def allocate_formation(
        self,
        state: AllocationState,
        formation_key: str,
        candidates: Sequence[Concept],
        targets: AllocationTargets
    ) -> AllocationState:
        """Primary pass for one formation: quota-bounded top pass and run concepts."""
        context = analyze_formation_key(formation_key, self.formations)
        if context is None:
            return state

        scored = [
            ScoredConcept(concept, score_concept(concept, context, self.config))
            for concept in candidates
            if self._usage_key(formation_key, concept) not in state.used_keys
        ]
        viable = sorted(
            (s for s in scored if s.result.score >= self.config.viability_floor),
            key=lambda s: s.result.score,
            reverse=True,
        )
        pass_ranked = [s for s in viable if s.concept.concept_type == ConceptType.PASS]
        run_ranked = [s for s in viable if s.concept.concept_type == ConceptType.RUN]

        pass_to_add = math.ceil(targets.plays_per_formation * targets.pass_run_ratio)
        run_to_add = targets.plays_per_formation - pass_to_add

        # Shift late formations toward whichever type is still short
        if state.pass_added >= targets.target_pass_plays:
            run_to_add += pass_to_add
            pass_to_add = 0
        if state.run_added >= targets.target_run_plays:
            pass_to_add += run_to_add
            run_to_add = 0

        # Never exceed the overall target; trim the type furthest past its global target
        remaining = max(targets.target_play_count - len(state.plays), 0)
        while pass_to_add + run_to_add > remaining:
            pass_over = state.pass_added + pass_to_add - targets.target_pass_plays
            run_over = state.run_added + run_to_add - targets.target_run_plays
            if pass_to_add and (pass_over >= run_over or not run_to_add):
                pass_to_add -= 1
            else:
                run_to_add -= 1

        for item in pass_ranked[:pass_to_add] + run_ranked[:run_to_add]:
            state = self._add_play(state, formation_key, item)

        logger.debug(f"{formation_key}: {len(viable)} viable concepts, "
                     f"quota pass={pass_to_add} run={run_to_add}, total now {len(state.plays)}")
        return state

    def fill_shortfall(
        self,
        state: AllocationState,
        formation_keys: Sequence[str],
        candidates: Sequence[Concept],
        targets: AllocationTargets
    ) -> AllocationState:
        """Second pass: any viable unused concept, in catalog order, until the target is met."""
        for formation_key in formation_keys:
            if len(state.plays) >= targets.target_play_count:
                break

            context = analyze_formation_key(formation_key, self.formations)
            if context is None:
                continue

            for concept in candidates:
                if len(state.plays) >= targets.target_play_count:
                    break
                if self._usage_key(formation_key, concept) in state.used_keys:
                    continue

                result = score_concept(concept, context, self.config)
                if result.score < self.config.viability_floor:
                    continue

                state = self._add_play(state, formation_key, ScoredConcept(concept, result))

        return state

    def _usage_key(self, formation_key: str, concept: Concept) -> str:
        if self.config.allow_concept_reuse:
            return f"{formation_key}:{concept.id}"
        return concept.id

    def _add_play(self, state: AllocationState, formation_key: str, item: ScoredConcept) -> AllocationState:
        formation = self.formations[formation_key]
        play = GeneratedPlay(
            id=self.ids.new_id("play"),
            name=f"{formation.name} {item.concept.name}",
            formation_key=formation_key,
            formation_name=formation.name,
            concept=item.concept,
            score=item.result.score,
            rationale=list(item.result.rationale),
            selected=True,
        )
        return state.with_play(play, self._usage_key(formation_key, item.concept))


def generate_plays_for_formations(
    options: PlaybookOptions,
    config: Optional[GeneratorConfig] = None,
    id_factory: Optional[IdFactory] = None
) -> List[GeneratedPlay]:
    """Generate plays against the process-wide catalog."""
    catalog = load_catalog()
    generator = PlaybookGenerator(
        formations=catalog.formations.as_dict(),
        concepts=catalog.concepts.list(),
        config=config,
        id_factory=id_factory,
    )
    return generator.generate(options)


def get_generated_plays_stats(plays: Sequence[GeneratedPlay]) -> PlaybookStats:
    """Summarize selection state, pass/run split and formation spread."""
    selected = [p for p in plays if p.selected]
    pass_plays = sum(1 for p in selected if p.concept.concept_type == ConceptType.PASS)
    run_plays = sum(1 for p in selected if p.concept.concept_type == ConceptType.RUN)

    return PlaybookStats(
        total=len(plays),
        selected=len(selected),
        pass_plays=pass_plays,
        run_plays=run_plays,
        pass_run_ratio=pass_plays / (len(selected) or 1),
        formation_counts=dict(Counter(p.formation_key for p in selected)),
    )
