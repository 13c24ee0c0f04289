"""Shortcuts that are useful across dialog facets tests."""
from typing import Dict, List, Optional

from jose import jwt

from dialog_facets.models import Facet, FacetResult, FacetSource
from dialog_facets.services.facet_manager import InMemoryFacetStorage


class FacetBackend:
    """An in-memory facet backend whose results are set directly by tests."""

    def __init__(self):
        self.storage = InMemoryFacetStorage()
        self.results: Dict[str, List[FacetResult]] = {}

    def add_facet(
        self,
        facet_id: str,
        label: str,
        source: Optional[FacetSource] = None,
        results: Optional[List[FacetResult]] = None,
        only_visible_when_facet_source_is_visible: bool = False,
    ) -> Facet:
        source = source or FacetSource("search_page", rendered_in_current_request=True)
        facet = Facet(
            facet_id,
            label,
            source.id,
            facet_source=source,
            only_visible_when_facet_source_is_visible=only_visible_when_facet_source_is_visible,
        )
        self.storage.save(facet)
        self.results[facet_id] = results or []
        return facet

    def get_results(self, facet: Facet) -> List[FacetResult]:
        return self.results.get(facet.id, [])


def make_token(role: str = "admin", sub: str = "admin@example.com", **claims) -> str:
    """Sign a token with the test JWT secret."""
    return jwt.encode(
        {"sub": sub, "role": role, **claims}, "test-jwt-secret", algorithm="HS256"
    )


def admin_headers(**extra) -> dict:
    return {"Authorization": f"Bearer {make_token()}", **extra}
