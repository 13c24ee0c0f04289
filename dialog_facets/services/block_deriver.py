"""Derives one dialog facet link block plugin per existing facet."""
from typing import List

from ..config.settings import LINK_BLOCK_PLUGIN_ID, DERIVATIVE_SEPARATOR
from .facet_manager import FacetStorage


def make_plugin_id(derivative_id: str) -> str:
    """E.g., make_plugin_id("color") == "dialog_facets_link_block:color"."""
    return f"{LINK_BLOCK_PLUGIN_ID}{DERIVATIVE_SEPARATOR}{derivative_id}"


def get_derivative_definitions(facet_storage: FacetStorage) -> List[dict]:
    """Build a block plugin definition for every facet in `facet_storage`."""
    facets = facet_storage.load_multiple()
    return [
        {
            "id": make_plugin_id(facet_id),
            "base_plugin_id": LINK_BLOCK_PLUGIN_ID,
            "derivative_id": facet_id,
            "admin_label": f"Dialog facet link: {facet.label}",
            "config_dependencies": {"config": [facet.config_dependency_name]},
        }
        for facet_id, facet in sorted(facets.items())
    ]
