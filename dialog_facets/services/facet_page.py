"""Displays a facet within a page for rendering as a dialog."""
from ..models import Facet
from .facet_manager import (
    FacetManager,
    FacetStorage,
    get_facet_manager,
    get_facet_storage,
)


class DialogFacetsController:
    def __init__(self, facet_manager: FacetManager, facet_storage: FacetStorage):
        self.facet_manager = facet_manager
        self.facet_storage = facet_storage

    @classmethod
    def create(cls) -> "DialogFacetsController":
        """Build a controller backed by the current app's facet backend."""
        return cls(get_facet_manager(), get_facet_storage())

    def content(self, facet_id: str) -> dict:
        """
        Build the facet with id `facet_id` for display as a page. Returns an empty
        result if the facet doesn't exist, or if it should only be shown alongside
        a facet source that isn't rendered in this request.
        """
        facet = self.facet_storage.load(facet_id)

        # No need to build the facet if it does not need to be visible.
        if not facet or not self._is_visible(facet):
            return {}

        return self.facet_manager.build(facet)

    def title(self, facet_id: str) -> str:
        """Return the title of a facet page."""
        # NOTE: unlike `content`, a missing facet isn't handled here, so this
        # raises for an unknown `facet_id`.
        facet = self.facet_storage.load(facet_id)
        return facet.label

    @staticmethod
    def _is_visible(facet: Facet) -> bool:
        if not facet.only_visible_when_facet_source_is_visible:
            return True

        facet_source = facet.get_facet_source()
        return bool(facet_source and facet_source.is_rendered_in_current_request())
