"""API request/response schemas."""

from typing import List, Optional
from pydantic import BaseModel, Field

from ..core.models import GeneratedPlay, PlaybookOptions, PlaybookStats, PlayDocument


# ============================================================================
# Health
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = True
    version: str = "0.1.0"
    formations: int = 0
    concepts: int = 0


# ============================================================================
# Catalog
# ============================================================================

class FormationSummary(BaseModel):
    """Formation listing entry with its derived context."""
    id: str
    name: str
    player_count: int
    personnel: str
    structure: str
    strength_side: str


class ConceptSummary(BaseModel):
    """Concept listing entry."""
    id: str
    name: str
    concept_type: str
    category: Optional[str] = None
    summary: str = ""
    badges: List[str] = Field(default_factory=list)


# ============================================================================
# Generation
# ============================================================================

class GeneratePlaybookRequest(PlaybookOptions):
    """Generate playbook request (same fields as PlaybookOptions)."""
    pass


class GeneratePlaybookResponse(BaseModel):
    """Generated plays, best first, with summary stats."""
    plays: List[GeneratedPlay]
    stats: PlaybookStats
    requested: int
    shortfall: int = 0


class MaterializeRequest(BaseModel):
    """Expand reviewed plays into play documents (unselected plays are skipped)."""
    plays: List[GeneratedPlay] = Field(min_length=1)
    validate_documents: bool = False


class MaterializeResponse(BaseModel):
    documents: List[PlayDocument]
    skipped: int = 0
