"""In-memory registry for the read-only formation and concept catalog."""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, TypeVar, Generic
from threading import Lock
from .models import Concept, Formation
from .validation import validate_concept, validate_formation

T = TypeVar('T')

logger = logging.getLogger("playbook_engine.registry")

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


class Registry(Generic[T]):
    """Thread-safe, insertion-ordered in-memory registry for entities."""

    def __init__(self, name: str):
        self.name = name
        self._data: Dict[str, T] = {}
        self._lock = Lock()

    def create(self, id: str, entity: T) -> T:
        """Create a new entity."""
        with self._lock:
            if id in self._data:
                raise ValueError(f"{self.name} with id {id} already exists")
            self._data[id] = entity
        return entity

    def get(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        with self._lock:
            return self._data.get(id)

    def list(self) -> List[T]:
        """List all entities in insertion order."""
        with self._lock:
            return list(self._data.values())

    def as_dict(self) -> Dict[str, T]:
        """Snapshot of the registry keyed by id."""
        with self._lock:
            return dict(self._data)

    def clear(self) -> None:
        """Clear all entities (for testing)."""
        with self._lock:
            self._data.clear()

    def count(self) -> int:
        """Count entities."""
        with self._lock:
            return len(self._data)


class GlobalRegistry:
    """Global singleton registry for the catalog."""

    _instance = None
    _lock = Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize all registries."""
        self.formations = Registry[Formation]("Formation")
        self.concepts = Registry[Concept]("Concept")
        self._loaded = False

    def clear_all(self):
        """Clear all registries (for testing)."""
        self._loaded = False
        self.formations.clear()
        self.concepts.clear()

    def mark_loaded(self):
        """Flag the catalog as fully loaded."""
        self._loaded = True

    @property
    def is_loaded(self) -> bool:
        return self._loaded


# Global instance
registry = GlobalRegistry()

_load_lock = Lock()


def load_catalog(data_dir: Optional[Path] = None, reload: bool = False) -> GlobalRegistry:
    """Load formations.json and concepts.json into the global registry once.

    Raises ValidationError if any catalog entry is malformed.
    """
    if registry.is_loaded and not reload:
        return registry

    with _load_lock:
        # Another thread may have finished loading while we waited
        if registry.is_loaded and not reload:
            return registry

        data_dir = data_dir or DEFAULT_DATA_DIR
        registry.clear_all()

        with open(data_dir / "formations.json", encoding="utf-8") as f:
            for item in json.load(f):
                formation = Formation(**item)
                validate_formation(formation)
                registry.formations.create(formation.id, formation)

        with open(data_dir / "concepts.json", encoding="utf-8") as f:
            for item in json.load(f):
                concept = Concept(**item)
                validate_concept(concept)
                registry.concepts.create(concept.id, concept)

        registry.mark_loaded()
        logger.info(f"Catalog loaded: {registry.formations.count()} formations, "
                    f"{registry.concepts.count()} concepts")
    return registry
