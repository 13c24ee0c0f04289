"""Endpoints displaying a single facet as a page, the target of dialog links."""
from flask import Blueprint, jsonify

from ..shared.auth import public
from ..services.facet_page import DialogFacetsController

# Endpoints in this blueprint are addressed as "dialog_facets.<endpoint>"
facets_bp = Blueprint("dialog_facets", __name__)


@facets_bp.route("/<facet>", methods=["GET"])
@public
def facet(facet: str):
    """Display the facet with id `facet` as a page."""
    controller = DialogFacetsController.create()
    content = controller.content(facet)
    return jsonify({"title": controller.title(facet), "content": content})
