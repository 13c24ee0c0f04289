"""Endpoints for placing, configuring and rendering dialog facet link blocks."""
from flask import Blueprint, jsonify
from webargs import fields
from werkzeug.exceptions import BadRequest

from ..config.logging import get_logger
from ..models import (
    BlockConfigurations,
    BlockConfigurationSchema,
    BlockConfigurationListSchema,
    BlockPlacementSchema,
    BlockSettingsSchema,
)
from ..services.block_deriver import get_derivative_definitions
from ..services.facet_manager import get_facet_storage
from ..services.link_block import DialogFacetsLinkBlock
from ..shared.auth import get_current_admin, public, requires_auth
from ..shared.rest_utils import (
    with_lookup,
    marshal_response,
    unmarshal_request,
    delete_response,
    use_args_with_pagination,
)

logger = get_logger(__name__)

blocks_bp = Blueprint("blocks", __name__)

block_schema = BlockConfigurationSchema()
block_list_schema = BlockConfigurationListSchema()
block_placement_schema = BlockPlacementSchema()
block_settings_schema = BlockSettingsSchema()


@blocks_bp.route("/derivatives", methods=["GET"])
@public
def list_derivatives():
    """List the dialog facet link blocks available for placement, one per facet."""
    definitions = get_derivative_definitions(get_facet_storage())
    return jsonify({"_items": definitions, "_meta": {"total": len(definitions)}})


@blocks_bp.route("/", methods=["GET"])
@requires_auth("blocks")
@use_args_with_pagination({"facet": fields.Str()}, block_schema)
@marshal_response(block_list_schema)
def list_blocks(args: dict, pagination_args: dict):
    """List placed blocks, optionally only those for the facet given by `facet`."""
    facet_id = args.get("facet")

    def filter_(query):
        if facet_id:
            query = query.filter(BlockConfigurations.derivative_id == facet_id)
        return query

    blocks = BlockConfigurations.list(filter_=filter_, **pagination_args)
    total = BlockConfigurations.count(filter_=filter_)

    return {"_items": blocks, "_meta": {"total": total}}


@blocks_bp.route("/", methods=["POST"])
@requires_auth("blocks")
@unmarshal_request(block_placement_schema, "placement", load_sqla=False)
@marshal_response(block_schema, 201)
def place_block(placement: dict) -> BlockConfigurations:
    """Place a block for a facet, using the block's default configuration."""
    facet_id = placement["facet"]
    if not get_facet_storage().load(facet_id):
        raise BadRequest(f"No dialog facet link block exists for facet {facet_id}")

    link_block = DialogFacetsLinkBlock.create({}, facet_id)
    block = BlockConfigurations(
        plugin_id=link_block.plugin_id,
        derivative_id=facet_id,
        dependencies=link_block.calculate_dependencies(),
        **link_block.get_configuration(),
    )
    block.insert()

    logger.info(f"admin-action: {get_current_admin()} placed block {block.plugin_id}")

    return block


@blocks_bp.route("/<int:block>", methods=["GET"])
@public
@with_lookup(BlockConfigurations, "block")
def render_block(block: BlockConfigurations):
    """Render a placed block."""
    return jsonify(DialogFacetsLinkBlock.from_record(block).build())


@blocks_bp.route("/<int:block>/form", methods=["GET"])
@requires_auth("blocks_item")
@with_lookup(BlockConfigurations, "block")
def get_block_form(block: BlockConfigurations):
    """Describe the settings form for a placed block."""
    return jsonify(DialogFacetsLinkBlock.from_record(block).block_form())


@blocks_bp.route("/<int:block>", methods=["PATCH"])
@requires_auth("blocks_item")
@with_lookup(BlockConfigurations, "block", check_etag=True)
@unmarshal_request(block_settings_schema, "values", load_sqla=False)
@marshal_response(block_schema)
def submit_block_form(block: BlockConfigurations, values: dict) -> BlockConfigurations:
    """Save submitted settings form values for a placed block."""
    link_block = DialogFacetsLinkBlock.from_record(block)
    link_block.block_submit(values)
    block.update(
        changes={
            **link_block.get_configuration(),
            "dependencies": link_block.calculate_dependencies(),
        }
    )

    logger.info(f"admin-action: {get_current_admin()} configured block {block.id}")

    return block


@blocks_bp.route("/<int:block>", methods=["DELETE"])
@requires_auth("blocks_item")
@with_lookup(BlockConfigurations, "block", check_etag=True)
def remove_block(block: BlockConfigurations):
    """Remove a placed block."""
    block_id = block.id
    block.delete()

    logger.info(f"admin-action: {get_current_admin()} removed block {block_id}")

    return delete_response()


@blocks_bp.route("/dependencies/facet/<facet>", methods=["DELETE"])
@requires_auth("blocks")
def remove_facet_dependents(facet: str):
    """Remove the blocks that depend on a deleted facet."""
    removed = BlockConfigurations.remove_for_facet(facet)
    return jsonify({"_meta": {"total": removed}})
