"""A block containing a link that opens a facet in a dialog."""
import json
from typing import Dict, List
from urllib.parse import urlencode

from flask import url_for, current_app as app

from ..config.logging import get_logger
from ..models import Facet, BlockConfigurations, DEFAULT_DIALOG_TYPE
from ..shared.rest_utils import get_query_args
from .block_deriver import make_plugin_id
from .facet_manager import (
    FacetManager,
    FacetStorage,
    get_facet_manager,
    get_facet_storage,
)

logger = get_logger(__name__)

FACET_PAGE_ENDPOINT = "dialog_facets.facet"
CACHE_CONTEXTS = ["url.query_args"]

DIALOG_TYPE_LABELS = {
    "modal": "Modal dialog",
    "non_modal": "Non-modal dialog",
    "off_canvas": "Off-canvas dialog",
}


class DialogFacetsLinkBlock:
    """
    A derivative of the `dialog_facets_link_block` block plugin, bound to the
    facet whose id is `derivative_id`.
    """

    def __init__(
        self,
        configuration: dict,
        derivative_id: str,
        facet_manager: FacetManager,
        facet_storage: FacetStorage,
    ):
        self.derivative_id = derivative_id
        self.plugin_id = make_plugin_id(derivative_id)
        self.facet_manager = facet_manager
        self.facet_storage = facet_storage
        self.configuration = {**self.default_configuration(), **configuration}

    @classmethod
    def create(cls, configuration: dict, derivative_id: str) -> "DialogFacetsLinkBlock":
        """Build a block backed by the current app's facet backend."""
        return cls(
            configuration, derivative_id, get_facet_manager(), get_facet_storage()
        )

    @classmethod
    def from_record(cls, record: BlockConfigurations) -> "DialogFacetsLinkBlock":
        """Build the block for a placed block configuration record."""
        return cls.create(record.get_configuration(), record.derivative_id)

    def _load_facet(self):
        return self.facet_storage.load(self.derivative_id)

    def default_configuration(self) -> dict:
        facet = self._load_facet()
        return {
            "dialog_type": DEFAULT_DIALOG_TYPE,
            "link_title": facet.label if facet else "",
        }

    def get_configuration(self) -> dict:
        return dict(self.configuration)

    def block_form(self) -> dict:
        """Describe the settings form fields for this block."""
        return {
            "link_title": {
                "type": "textfield",
                "title": "Link text",
                "default_value": self.configuration["link_title"],
            },
            "dialog_type": {
                "type": "radios",
                "title": "Dialog type",
                "options": dict(DIALOG_TYPE_LABELS),
                "default_value": self.configuration.get("dialog_type")
                or DEFAULT_DIALOG_TYPE,
            },
        }

    def block_submit(self, values: dict):
        """Store submitted settings form `values` in this block's configuration."""
        self.configuration["link_title"] = values["link_title"]
        self.configuration["dialog_type"] = values["dialog_type"]

    def build(self) -> dict:
        """
        Build a link to this block's facet page, or only cache metadata if the
        facet currently has no results.
        """
        facet = self._load_facet()
        if not facet:
            return {}

        build: dict = {"#cache": {"contexts": list(CACHE_CONTEXTS)}}

        # Whether the link is shown depends on the facet having results, so the
        # facets of its source must be processed first. Building the facet would
        # tell us too, but at the cost of rendering it. Fetching the source's
        # facets initializes the manager's facets for that source; the list
        # isn't keyed by facet id, so it's re-keyed before processing.
        facets = self.re_key_facets(
            self.facet_manager.get_facets_by_facet_source_id(facet.facet_source_id)
        )
        self.facet_manager.process_facets(facet.facet_source_id)
        if not facets[facet.id].get_results():
            logger.debug(f"facet {facet.id} has no results, so no dialog link")
            return build

        # The dialog link carries the current page's query parameters so the
        # facet page keeps the context of the active search.
        query = get_query_args()
        route_parameters = {"facet": facet.id}
        href = url_for(FACET_PAGE_ENDPOINT, **route_parameters)
        if query:
            href = f"{href}?{urlencode(query, doseq=True)}"

        build["link"] = {
            "type": "link",
            "title": self.configuration["link_title"],
            "url": {
                "route": FACET_PAGE_ENDPOINT,
                "route_parameters": route_parameters,
                "query": query,
                "href": href,
            },
            "attributes": {
                "class": ["use-ajax"],
                "data-dialog-options": json.dumps({"width": app.config["DIALOG_WIDTH"]}),
                **self._dialog_attributes(),
            },
            "attached": {"library": [app.config["DIALOG_LIBRARY"]]},
        }

        return build

    def _dialog_attributes(self) -> Dict[str, str]:
        dialog_type = self.configuration.get("dialog_type")
        if dialog_type == "non_modal":
            return {"data-dialog-type": "dialog"}
        if dialog_type == "off_canvas":
            return {"data-dialog-type": "dialog", "data-dialog-renderer": "off_canvas"}
        # Modal is the default for anything else
        return {"data-dialog-type": "modal"}

    @staticmethod
    def re_key_facets(facets: List[Facet]) -> Dict[str, Facet]:
        """Key facets returned by `FacetManager.get_facets_by_facet_source_id` by id."""
        return {facet.id: facet for facet in facets}

    def calculate_dependencies(self) -> Dict[str, List[str]]:
        # NOTE: this raises if the facet no longer exists.
        facet = self._load_facet()
        return {"config": [facet.config_dependency_name]}
