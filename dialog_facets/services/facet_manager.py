"""
Interfaces to the faceted-search backend that owns facets and computes their
results, plus an in-memory backend used for development and testing.

An app holds one `FacetStorage` and a factory for `FacetManager`s. Managers keep
per-request state (facets initialized for a source, computed results), so each
request gets its own manager via `get_facet_manager`.
"""
import copy
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Set, Tuple

from flask import Flask, g, current_app as app
from werkzeug.utils import import_string

from ..config.logging import get_logger
from ..models import Facet, FacetResult

logger = get_logger(__name__)

EXTENSION_KEY = "dialog_facets"
MANAGER_KEY = "facet_manager"


class FacetStorage(ABC):
    """Entity storage for facets."""

    @abstractmethod
    def load(self, facet_id: str) -> Optional[Facet]:
        """Load the facet with id `facet_id`, or `None` if no such facet exists."""

    @abstractmethod
    def load_multiple(self) -> Dict[str, Facet]:
        """Load all facets, keyed by facet id."""


class FacetManager(ABC):
    """Computes facet results for a facet source and renders facets."""

    @abstractmethod
    def build(self, facet: Facet) -> dict:
        """Build the render structure for `facet`."""

    @abstractmethod
    def get_facets_by_facet_source_id(self, facet_source_id: str) -> List[Facet]:
        """
        Get the facets displayed on `facet_source_id`. The returned list is not
        keyed by facet id.
        """

    @abstractmethod
    def process_facets(self, facet_source_id: str):
        """Compute the results of every facet on `facet_source_id`."""


ManagerFactory = Callable[[FacetStorage], FacetManager]
ResultProvider = Callable[[Facet], List[FacetResult]]


class InMemoryFacetStorage(FacetStorage):
    def __init__(self, facets: Optional[List[Facet]] = None):
        self._facets: Dict[str, Facet] = {}
        for facet in facets or []:
            self.save(facet)

    def save(self, facet: Facet):
        self._facets[facet.id] = facet

    def delete(self, facet_id: str):
        self._facets.pop(facet_id, None)

    def load(self, facet_id: str) -> Optional[Facet]:
        facet = self._facets.get(facet_id)
        # Hand out copies so results computed in one request don't leak into others
        return copy.copy(facet) if facet else None

    def load_multiple(self) -> Dict[str, Facet]:
        return {id: copy.copy(facet) for id, facet in self._facets.items()}


class InMemoryFacetManager(FacetManager):
    """
    A facet manager whose results come from `result_provider`, a callable
    mapping a facet to its results for the current request.
    """

    def __init__(
        self,
        storage: FacetStorage,
        result_provider: Optional[ResultProvider] = None,
    ):
        self.storage = storage
        self.result_provider = result_provider or (lambda facet: [])
        # Facets initialized so far, keyed by facet source id
        self._facets: Dict[str, List[Facet]] = {}
        self._processed: Set[str] = set()

    def _init_facets(self, facet_source_id: str):
        if facet_source_id not in self._facets:
            self._facets[facet_source_id] = [
                facet
                for facet in self.storage.load_multiple().values()
                if facet.facet_source_id == facet_source_id
            ]

    def get_facets_by_facet_source_id(self, facet_source_id: str) -> List[Facet]:
        self._init_facets(facet_source_id)
        return list(self._facets[facet_source_id])

    def process_facets(self, facet_source_id: str):
        if facet_source_id in self._processed:
            return

        self._init_facets(facet_source_id)
        for facet in self._facets[facet_source_id]:
            facet.set_results(self.result_provider(facet))
        self._processed.add(facet_source_id)
        logger.debug(
            f"processed {len(self._facets[facet_source_id])} facet(s) for source {facet_source_id}"
        )

    def build(self, facet: Facet) -> dict:
        self.process_facets(facet.facet_source_id)
        processed = {f.id: f for f in self._facets[facet.facet_source_id]}.get(
            facet.id, facet
        )
        return {
            "facet_id": facet.id,
            "label": facet.label,
            "items": [result.to_dict() for result in processed.get_results()],
        }


def in_memory_backend() -> Tuple[FacetStorage, ManagerFactory]:
    """The default facet backend: empty in-memory storage with no results."""
    return InMemoryFacetStorage(), InMemoryFacetManager


def register_facet_backend(
    app: Flask, storage: FacetStorage, manager_factory: ManagerFactory
):
    """Use `storage` and managers built by `manager_factory` for facets in `app`."""
    app.extensions[EXTENSION_KEY] = {
        "storage": storage,
        "manager_factory": manager_factory,
    }


def init_facet_backend(app: Flask):
    """Register the facet backend named by `app`'s FACETS_BACKEND setting."""
    backend = import_string(app.config["FACETS_BACKEND"])
    storage, manager_factory = backend()
    register_facet_backend(app, storage, manager_factory)
    logger.info(f"using facet backend {app.config['FACETS_BACKEND']}")


def get_facet_storage() -> FacetStorage:
    return app.extensions[EXTENSION_KEY]["storage"]


def get_facet_manager() -> FacetManager:
    """Get the facet manager for the current request, creating it if necessary."""
    if MANAGER_KEY not in g:
        factory = app.extensions[EXTENSION_KEY]["manager_factory"]
        setattr(g, MANAGER_KEY, factory(get_facet_storage()))
    return g.get(MANAGER_KEY)
