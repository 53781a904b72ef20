"""Read-only component catalog repositories.

The engine only depends on `CatalogRepository`, so a file-backed, database,
or CMS-backed source can be swapped in without touching scoring logic.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from pcfinder.errors import CatalogUnavailable
from pcfinder.models.components import ComponentSpec, ComponentType

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "default_catalog.json"

_COMPONENT_LIST = TypeAdapter(List[ComponentSpec])


# ──────────────────────────────────────────────
# Abstract Repository
# ──────────────────────────────────────────────


class CatalogRepository(ABC):
    """Read-only, category-grouped view over catalog entries."""

    @abstractmethod
    def components(self) -> Tuple[ComponentSpec, ...]:
        """Every catalog entry, in a stable order."""
        ...

    def by_category(self, category: ComponentType) -> Tuple[ComponentSpec, ...]:
        return tuple(c for c in self.components() if c.category == category)

    def grouped(self) -> Mapping[ComponentType, Tuple[ComponentSpec, ...]]:
        """Category → entries. Categories with no entries are absent."""
        groups: Dict[ComponentType, List[ComponentSpec]] = {}
        for c in self.components():
            groups.setdefault(c.category, []).append(c)
        return MappingProxyType({k: tuple(v) for k, v in groups.items()})

    def fingerprint(self) -> str:
        """Stable digest of the catalog contents, used in cache keys."""
        raw = json.dumps(
            [c.model_dump(mode="json") for c in self.components()],
            sort_keys=True,
        )
        return hashlib.sha256(raw.encode()).hexdigest()[:16]


# ──────────────────────────────────────────────
# Concrete Repositories
# ──────────────────────────────────────────────


class InMemoryCatalog(CatalogRepository):
    """Immutable catalog built from an iterable of ComponentSpec.

    Entries are frozen into tuples at construction; the grouped view and the
    fingerprint are computed once, so concurrent readers never lock.
    """

    def __init__(self, components: Iterable[ComponentSpec]) -> None:
        items = tuple(components)
        if not items:
            raise CatalogUnavailable("Component catalog is empty")

        seen: set[str] = set()
        for c in items:
            if c.id in seen:
                raise CatalogUnavailable(f"Duplicate component id in catalog: {c.id}")
            seen.add(c.id)

        self._components = items
        self._grouped = super().grouped()
        self._fingerprint = super().fingerprint()

    def components(self) -> Tuple[ComponentSpec, ...]:
        return self._components

    def by_category(self, category: ComponentType) -> Tuple[ComponentSpec, ...]:
        return self._grouped.get(category, ())

    def grouped(self) -> Mapping[ComponentType, Tuple[ComponentSpec, ...]]:
        return self._grouped

    def fingerprint(self) -> str:
        return self._fingerprint

    def __len__(self) -> int:
        return len(self._components)


class JsonFileCatalog(InMemoryCatalog):
    """Catalog loaded from a JSON array of ComponentSpec objects."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        if not self.path.exists():
            raise CatalogUnavailable(f"Catalog file not found: {self.path}")
        try:
            components = _COMPONENT_LIST.validate_json(self.path.read_bytes())
        except ValidationError as e:
            raise CatalogUnavailable(
                f"Catalog file {self.path} failed validation: {e.error_count()} errors"
            ) from e
        super().__init__(components)
        logger.info("Loaded %d catalog entries from %s", len(self), self.path)


# ──────────────────────────────────────────────
# Process-wide Provider
# ──────────────────────────────────────────────


class CatalogProvider:
    """Loads a catalog exactly once behind a lock, then serves it lock-free.

    The owner (normally the app lifespan) holds the provider; the loaded
    catalog is immutable, so concurrent recommendation requests share it.
    """

    def __init__(self, loader: Callable[[], CatalogRepository]) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._catalog: Optional[CatalogRepository] = None

    @classmethod
    def from_path(cls, path: Path | str | None = None) -> "CatalogProvider":
        target = Path(path) if path else DEFAULT_CATALOG_PATH
        return cls(lambda: JsonFileCatalog(target))

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    def get(self) -> CatalogRepository:
        catalog = self._catalog
        if catalog is not None:
            return catalog
        with self._lock:
            if self._catalog is None:
                self._catalog = self._loader()
            return self._catalog
