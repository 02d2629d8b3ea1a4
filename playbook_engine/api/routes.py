"""API route handlers."""

import logging
import traceback
from typing import List, Optional
from fastapi import APIRouter, HTTPException, status

from . import schemas
from ..core.models import ConceptType
from ..core.registry import load_catalog
from ..core.validation import ValidationError, validate_play_document
from ..playbook.analyzer import analyze_formation
from ..playbook.document import FormationNotFoundError, build_play_document
from ..playbook.planner import PlaybookGenerator, get_generated_plays_stats

logger = logging.getLogger("playbook_engine.api")

router = APIRouter()


# ============================================================================
# Health
# ============================================================================

@router.get("/health", response_model=schemas.HealthResponse)
async def health_check():
    """Health check endpoint."""
    catalog = load_catalog()
    return schemas.HealthResponse(
        ok=True,
        version="0.1.0",
        formations=catalog.formations.count(),
        concepts=catalog.concepts.count(),
    )


# ============================================================================
# Catalog
# ============================================================================

@router.get("/formations", response_model=List[schemas.FormationSummary])
async def list_formations():
    """List catalog formations with their derived context."""
    summaries = []
    for formation in load_catalog().formations.list():
        context = analyze_formation(formation)
        summaries.append(schemas.FormationSummary(
            id=formation.id,
            name=formation.name,
            player_count=len(formation.players),
            personnel=context.personnel,
            structure=context.structure.value,
            strength_side=context.strength_side.value,
        ))
    return summaries


@router.get("/formations/{formation_id}")
async def get_formation(formation_id: str):
    """Get a specific formation."""
    formation = load_catalog().formations.get(formation_id)
    if formation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Formation {formation_id} not found"
        )
    return formation.model_dump()


@router.get("/concepts", response_model=List[schemas.ConceptSummary])
async def list_concepts(concept_type: Optional[ConceptType] = None):
    """List catalog concepts, optionally filtered by type."""
    return [
        schemas.ConceptSummary(
            id=c.id,
            name=c.name,
            concept_type=c.concept_type.value,
            category=c.category,
            summary=c.summary,
            badges=c.badges,
        )
        for c in load_catalog().concepts.list()
        if concept_type is None or c.concept_type == concept_type
    ]


@router.get("/concepts/{concept_id}")
async def get_concept(concept_id: str):
    """Get a specific concept."""
    concept = load_catalog().concepts.get(concept_id)
    if concept is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Concept {concept_id} not found"
        )
    return concept.model_dump()


# ============================================================================
# Playbook generation
# ============================================================================

@router.post("/playbooks/generate", response_model=schemas.GeneratePlaybookResponse)
async def generate_playbook(request: schemas.GeneratePlaybookRequest):
    """
    Generate a balanced playbook for the requested formations.

    Unknown formation keys are skipped; if none of the requested formations
    exist the request is rejected.
    """
    catalog = load_catalog()
    formations = catalog.formations.as_dict()

    missing = [key for key in request.formations if key not in formations]
    if request.formations and len(missing) == len(request.formations):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Formations not found: {missing}"
        )

    generator = PlaybookGenerator(formations, catalog.concepts.list())
    plays = generator.generate(request)

    return schemas.GeneratePlaybookResponse(
        plays=plays,
        stats=get_generated_plays_stats(plays),
        requested=request.target_play_count,
        shortfall=max(0, request.target_play_count - len(plays)),
    )


@router.post("/playbooks/materialize", response_model=schemas.MaterializeResponse)
async def materialize_playbook(request: schemas.MaterializeRequest):
    """Expand selected plays into full play documents."""
    formations = load_catalog().formations.as_dict()
    documents = []

    try:
        for play in request.plays:
            if not play.selected:
                continue
            document = build_play_document(play, formations)
            if request.validate_documents:
                validate_play_document(document)
            documents.append(document)
    except FormationNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ValidationError as e:
        logger.error(f"Materialized play failed validation: {traceback.format_exc()}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return schemas.MaterializeResponse(
        documents=documents,
        skipped=len(request.plays) - len(documents),
    )
