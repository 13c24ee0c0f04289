from marshmallow import Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..config.db import db
from .models import BlockConfigurations, DIALOG_TYPES


class BaseSchema(SQLAlchemyAutoSchema):
    class Meta:
        sqla_session = db.session
        include_fk = True
        load_instance = True

    # Read-only fields common across all schemas
    _created = fields.DateTime(dump_only=True)
    _updated = fields.DateTime(dump_only=True)
    _etag = fields.Str(dump_only=True)


class _ListMetadata(Schema):
    total = fields.Int(required=True)


def _make_list_schema(schema: BaseSchema):
    class ListSchema(Schema):
        _items = fields.List(fields.Nested(schema), required=True)
        _meta = fields.Nested(_ListMetadata(), required=True)

    return ListSchema


class BlockConfigurationSchema(BaseSchema):
    class Meta(BaseSchema.Meta):
        model = BlockConfigurations

    plugin_id = fields.Str(dump_only=True)
    derivative_id = fields.Str(dump_only=True)
    dependencies = fields.Dict(dump_only=True)


BlockConfigurationListSchema = _make_list_schema(BlockConfigurationSchema())


class BlockPlacementSchema(Schema):
    """Request body for placing a dialog facet link block."""

    facet = fields.Str(required=True)


class BlockSettingsSchema(Schema):
    """Values submitted through a dialog facet link block's settings form."""

    link_title = fields.Str(required=True)
    dialog_type = fields.Str(required=True, validate=validate.OneOf(DIALOG_TYPES))
