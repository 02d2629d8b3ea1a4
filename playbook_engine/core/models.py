"""Canonical data models for Playbook Engine."""

from enum import Enum
from typing import Annotated, Optional, Dict, List, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# Enums
# ============================================================================

class ConceptType(str, Enum):
    PASS = "pass"
    RUN = "run"


class Structure(str, Enum):
    """Coarse formation shape classification."""
    TWO_BY_TWO = "2x2"
    THREE_BY_ONE = "3x1"
    BUNCH = "bunch"
    STACK = "stack"
    TRIPS = "trips"
    TWINS = "twins"
    I_FORM = "I"
    ACE = "ace"
    EMPTY = "empty"
    PISTOL = "pistol"


class FieldSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class DefaultSide(str, Enum):
    """Play side named by a concept's build policy."""
    STRENGTH = "strength"
    BOUNDARY = "boundary"
    FIELD = "field"
    LEFT = "left"
    RIGHT = "right"


class PathType(str, Enum):
    STRAIGHT = "straight"
    TENSION = "tension"


class RunCategory(str, Enum):
    INSIDE_ZONE = "inside_zone"
    OUTSIDE_ZONE = "outside_zone"
    GAP = "gap"
    POWER = "power"
    COUNTER = "counter"
    OPTION = "option"
    SPECIAL = "special"


class SurfaceNeeds(str, Enum):
    TE_REQUIRED = "te_required"
    TE_PREFERRED = "te_preferred"
    TE_OPTIONAL = "te_optional"
    NO_TE = "no_te"


# ============================================================================
# Field geometry
# ============================================================================

class Point(BaseModel):
    """Normalized field coordinate (x across the field, y relative to LOS)."""
    x: float
    y: float


class Appearance(BaseModel):
    """Player marker styling carried through to the play document."""
    shape: str = "circle"
    fill: str = "#3b82f6"
    stroke: str = "#ffffff"
    stroke_width: float = 2
    radius: float = 16
    label_color: str = "#ffffff"
    label_font_size: int = 12
    show_label: bool = True


# ============================================================================
# Formations and Players
# ============================================================================

class FormationPlayer(BaseModel):
    """Player slot in a catalog formation."""
    role: str
    label: Optional[str] = None
    x: float
    y: float
    appearance: Optional[Appearance] = None


class Formation(BaseModel):
    """Named alignment template."""
    id: str
    name: str
    players: List[FormationPlayer] = Field(min_length=1)


class Player(BaseModel):
    """Materialized roster entry for one play."""
    id: str
    role: str
    label: Optional[str] = None
    unit: Literal["offense", "defense"] = "offense"
    alignment: Point
    appearance: Appearance = Field(default_factory=Appearance)


class FormationContext(BaseModel):
    """Structural features derived from a formation's player list."""
    model_config = ConfigDict(frozen=True)

    personnel: str
    receiver_count: int = Field(ge=0)
    has_tight_end: bool
    has_fullback: bool
    structure: Structure
    strength_side: FieldSide = FieldSide.RIGHT


# ============================================================================
# Concepts
# ============================================================================

class RouteAssignment(BaseModel):
    """Default route for a template role (depth in yards)."""
    pattern: str
    depth: Optional[float] = None
    direction: Optional[str] = None
    break_angle_deg: Optional[float] = None


class BlockAssignment(BaseModel):
    """Default block for a template role."""
    scheme: str
    target: Optional[str] = None


class TemplateRole(BaseModel):
    role_name: str
    applies_to: List[str] = Field(default_factory=list)
    default_route: Optional[RouteAssignment] = None
    default_block: Optional[BlockAssignment] = None
    notes: Optional[str] = None


class BuildPolicy(BaseModel):
    placement_strategy: str = "relative_to_alignment"
    default_side: DefaultSide = DefaultSide.STRENGTH
    conflict_policy: Optional[str] = None
    route_depth_scale: Optional[float] = None
    run_landmarks: Optional[bool] = None


class ConceptTemplate(BaseModel):
    roles: List[TemplateRole] = Field(default_factory=list)
    build_policy: BuildPolicy = Field(default_factory=BuildPolicy)


class ConceptRequirements(BaseModel):
    """Matching requirements; pass and run concepts use different subsets."""
    min_eligible_receivers: Optional[int] = None
    preferred_structures: Optional[List[str]] = None
    personnel_hints: Optional[List[str]] = None
    needs_te: Optional[bool] = None
    needs_puller: Optional[str] = None
    box_tolerance: Optional[str] = None
    preferred_formations: Optional[List[str]] = None


class PassHints(BaseModel):
    category: str
    man_beater: bool = False
    zone_beater: bool = False
    stress: List[str] = Field(default_factory=list)
    drop_type: Optional[str] = None


class RunHints(BaseModel):
    category: RunCategory
    best_vs_front: List[str] = Field(default_factory=list)
    best_vs_3t: List[str] = Field(default_factory=list)
    best_when_box: List[str] = Field(default_factory=list)
    surface_needs: Optional[SurfaceNeeds] = None
    aim: Optional[str] = None


class SuggestionHints(BaseModel):
    pass_hints: Optional[PassHints] = None
    run_hints: Optional[RunHints] = None


class Concept(BaseModel):
    """Schematic template (pass combination or run scheme)."""
    id: str
    name: str
    concept_type: ConceptType
    summary: str = ""
    badges: List[str] = Field(default_factory=list)
    requirements: ConceptRequirements = Field(default_factory=ConceptRequirements)
    template: ConceptTemplate = Field(default_factory=ConceptTemplate)
    suggestion_hints: SuggestionHints = Field(default_factory=SuggestionHints)

    @property
    def category(self) -> Optional[str]:
        """Pass or run hint category, whichever applies to this concept."""
        hints = self.suggestion_hints
        if self.concept_type == ConceptType.PASS:
            return hints.pass_hints.category if hints.pass_hints else None
        return hints.run_hints.category.value if hints.run_hints else None


# ============================================================================
# Actions
# ============================================================================

class RouteDetail(BaseModel):
    pattern: str
    depth: Optional[float] = None
    control_points: List[Point] = Field(min_length=2)
    path_type: PathType = PathType.STRAIGHT
    tension: float = 0.0


class BlockTarget(BaseModel):
    to_player_id: Optional[str] = None
    landmark: Point


class BlockDetail(BaseModel):
    scheme: str
    target: BlockTarget
    path_points: List[Point] = Field(min_length=2)
    path_type: PathType = PathType.STRAIGHT


class RouteAction(BaseModel):
    id: str
    action_type: Literal["route"] = "route"
    from_player_id: str
    route: RouteDetail


class BlockAction(BaseModel):
    id: str
    action_type: Literal["block"] = "block"
    from_player_id: str
    block: BlockDetail


Action = Annotated[Union[RouteAction, BlockAction], Field(discriminator="action_type")]


class BuildResult(BaseModel):
    actions: List[Action] = Field(default_factory=list)
    actions_created: int = 0


# ============================================================================
# Generation
# ============================================================================

class CategoryFilter(BaseModel):
    """Optional category whitelist per concept type."""
    model_config = ConfigDict(populate_by_name=True)

    pass_categories: List[str] = Field(default_factory=list, alias="pass")
    run_categories: List[str] = Field(default_factory=list, alias="run")


class PlaybookOptions(BaseModel):
    """Options for one playbook generation run."""
    formations: List[str]
    target_play_count: int = Field(default=30, ge=1, le=500)
    pass_run_ratio: float = Field(default=0.5, ge=0.0, le=1.0)
    include_categories: Optional[CategoryFilter] = None


class GeneratedPlay(BaseModel):
    """Candidate (formation, concept) pairing awaiting review."""
    id: str
    name: str
    formation_key: str
    formation_name: str
    concept: Concept
    score: int = Field(ge=0, le=100)
    rationale: List[str] = Field(default_factory=list)
    selected: bool = True


class PlaybookStats(BaseModel):
    """Summary of a generated playbook."""
    total: int
    selected: int
    pass_plays: int
    run_plays: int
    pass_run_ratio: float
    formation_counts: Dict[str, int] = Field(default_factory=dict)


class GeneratorConfig(BaseModel):
    """Scoring and allocation tunables."""
    base_score: int = Field(default=50, ge=0, le=100)
    viability_floor: int = Field(default=40, ge=0, le=100)
    # When enabled a concept may be reused once per formation instead of once per run
    allow_concept_reuse: bool = False


# ============================================================================
# Play Document
# ============================================================================

class PlayMeta(BaseModel):
    personnel: str = "11"
    formation_name: str
    concept_name: str
    concept_id: str
    strength: FieldSide = FieldSide.RIGHT


class PlayNotes(BaseModel):
    call_name: str
    coaching_points: List[str] = Field(default_factory=list)


class PlayDocument(BaseModel):
    """Fully materialized play handed to the persistence layer."""
    schema_version: Literal["1.0"] = "1.0"
    type: Literal["play"] = "play"
    id: str
    name: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    meta: PlayMeta
    roster: List[Player]
    actions: List[Action] = Field(default_factory=list)
    notes: PlayNotes
    created_at: str
    updated_at: str

    @model_validator(mode='after')
    def validate_action_owners(self):
        """Ensure every action starts from a player in this roster."""
        player_ids = {player.id for player in self.roster}
        for action in self.actions:
            if action.from_player_id not in player_ids:
                raise ValueError(f"Action {action.id} references unknown player {action.from_player_id}")
        return self
