"""
Types describing facets owned by the faceted-search backend.

This app never creates, mutates or persists facets. Backends hand out instances
of these classes (or objects with the same interface) and fill in each facet's
results while processing a facet source.
"""
from typing import Any, Dict, List, Optional

from ..config.settings import FACET_CONFIG_PREFIX


def facet_config_dependency_name(facet_id: str) -> str:
    """The config dependency name under which a facet with id `facet_id` is known."""
    return f"{FACET_CONFIG_PREFIX}.{facet_id}"


class FacetSource:
    """Where a facet's options are queried and displayed, e.g. a search page."""

    id: str
    rendered_in_current_request: bool

    def __init__(self, id: str, rendered_in_current_request: bool = False):
        self.id = id
        self.rendered_in_current_request = rendered_in_current_request

    def is_rendered_in_current_request(self) -> bool:
        return self.rendered_in_current_request


class FacetResult:
    raw_value: str
    display_value: str
    count: Optional[int]
    active: bool

    def __init__(
        self,
        raw_value: str,
        display_value: Optional[str] = None,
        count: Optional[int] = None,
        active: bool = False,
    ):
        self.raw_value = raw_value
        self.display_value = raw_value if display_value is None else display_value
        self.count = count
        self.active = active

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_value": self.raw_value,
            "display_value": self.display_value,
            "count": self.count,
            "active": self.active,
        }


class Facet:
    id: str
    label: str
    facet_source_id: str
    only_visible_when_facet_source_is_visible: bool
    facet_source: Optional[FacetSource]

    def __init__(
        self,
        id: str,
        label: str,
        facet_source_id: str,
        facet_source: Optional[FacetSource] = None,
        only_visible_when_facet_source_is_visible: bool = False,
    ):
        self.id = id
        self.label = label
        self.facet_source_id = facet_source_id
        self.facet_source = facet_source
        self.only_visible_when_facet_source_is_visible = (
            only_visible_when_facet_source_is_visible
        )
        self._results: List[FacetResult] = []

    def get_facet_source(self) -> Optional[FacetSource]:
        return self.facet_source

    def get_results(self) -> List[FacetResult]:
        """Results computed for the current request, empty until processed."""
        return self._results

    def set_results(self, results: List[FacetResult]):
        self._results = list(results)

    @property
    def config_dependency_name(self) -> str:
        return facet_config_dependency_name(self.id)

    def __repr__(self):
        return f"<Facet {self.id!r} ({self.facet_source_id})>"
