"""Concept-to-formation fitness scoring."""

from dataclasses import dataclass, field
from typing import List, Optional

from ..core.models import (
    Concept, ConceptType, FormationContext, GeneratorConfig, RunCategory,
    Structure, SurfaceNeeds
)

MIN_SCORE = 0
MAX_SCORE = 100


@dataclass
class ConceptScore:
    """Fitness score plus coaching-point rationale, in evaluation order."""
    score: int
    rationale: List[str] = field(default_factory=list)


def _score_pass(concept: Concept, context: FormationContext, score: int, rationale: List[str]) -> int:
    req = concept.requirements

    if req.min_eligible_receivers:
        if context.receiver_count >= req.min_eligible_receivers:
            score += 20
            rationale.append(f"{context.receiver_count} receivers available")
        else:
            score -= 30

    if req.needs_te:
        if context.has_tight_end:
            score += 10
            rationale.append("TE surface available")
        else:
            score -= 40

    if req.preferred_structures and context.structure.value in req.preferred_structures:
        score += 20
        rationale.append(f"Works well with {context.structure.value}")

    if req.personnel_hints and context.personnel in req.personnel_hints:
        score += 10
        rationale.append(f"Fits {context.personnel} personnel")

    return score


def _score_run(concept: Concept, context: FormationContext, score: int, rationale: List[str]) -> int:
    req = concept.requirements
    hints = concept.suggestion_hints.run_hints
    category = hints.category if hints else None
    surface_needs = hints.surface_needs if hints else None

    if surface_needs == SurfaceNeeds.TE_REQUIRED:
        if context.has_tight_end:
            score += 15
            rationale.append("TE provides run support")
        else:
            score -= 50

    if context.has_fullback and category in (RunCategory.POWER, RunCategory.GAP):
        score += 15
        rationale.append("FB available for lead block")

    if category == RunCategory.OUTSIDE_ZONE and context.structure in (Structure.TWO_BY_TWO, Structure.TRIPS):
        score += 10
        rationale.append("Spread formation for outside run")

    if category in (RunCategory.INSIDE_ZONE, RunCategory.GAP):
        if context.structure == Structure.I_FORM or context.has_fullback:
            score += 15
            rationale.append("Heavy backfield for inside run")

    if req.personnel_hints and context.personnel in req.personnel_hints:
        score += 10
        rationale.append(f"Fits {context.personnel} personnel")

    return score


def score_concept(
    concept: Concept,
    context: FormationContext,
    config: Optional[GeneratorConfig] = None
) -> ConceptScore:
    """
    Score a concept against a formation context.

    Starts from the configured base score, applies the pass or run
    adjustments and clamps the result to [0, 100].

    Args:
        concept: Catalog concept to evaluate
        context: Output of the formation analyzer
        config: Scoring tunables (defaults when None)

    Returns:
        ConceptScore with the clamped score and rationale strings
    """
    config = config or GeneratorConfig()
    rationale: List[str] = []
    score = config.base_score

    if concept.concept_type == ConceptType.PASS:
        score = _score_pass(concept, context, score, rationale)
    elif concept.concept_type == ConceptType.RUN:
        score = _score_run(concept, context, score, rationale)

    return ConceptScore(score=max(MIN_SCORE, min(MAX_SCORE, score)), rationale=rationale)
