"""Playbook module: formation analysis, concept scoring, allocation and action building."""

from .analyzer import analyze_formation, analyze_formation_key
from .scoring import ConceptScore, score_concept
from .planner import PlaybookGenerator, generate_plays_for_formations, get_generated_plays_stats
from .builder import build_concept_actions
from .fallback import assign_default_actions
from .document import FormationNotFoundError, build_play_document, build_play_documents, get_ball_carrier_role

__all__ = [
    "analyze_formation",
    "analyze_formation_key",
    "ConceptScore",
    "score_concept",
    "PlaybookGenerator",
    "generate_plays_for_formations",
    "get_generated_plays_stats",
    "build_concept_actions",
    "assign_default_actions",
    "FormationNotFoundError",
    "build_play_document",
    "build_play_documents",
    "get_ball_carrier_role",
]
