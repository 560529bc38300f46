"""Post resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class PostCreateSchema(Schema):
    """Payload for creating a post. ``owner_id`` is never accepted from clients."""

    class Meta:
        unknown = EXCLUDE

    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    sender_id = fields.String(required=True, validate=validate.Length(min=1, max=100))


class PostUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    title = fields.String(validate=validate.Length(min=1, max=200))
    sender_id = fields.String(validate=validate.Length(min=1, max=100))


class PostFilterSchema(Schema):
    """Supported query parameters for listing posts."""

    class Meta:
        unknown = EXCLUDE

    sender_id = fields.String(load_default=None, validate=validate.Length(min=1, max=100))


class PostSchema(Schema):
    """Public representation of a post."""

    id = fields.Integer(required=True)
    title = fields.String(required=True)
    sender_id = fields.String(required=True)
    owner_id = fields.Integer(required=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
