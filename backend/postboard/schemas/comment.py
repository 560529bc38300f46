"""Comment resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class CommentCreateSchema(Schema):
    """Payload for commenting on a post; ``post_id`` comes from the URL."""

    class Meta:
        unknown = EXCLUDE

    content = fields.String(required=True, validate=validate.Length(min=1))
    author = fields.String(required=True, validate=validate.Length(min=1, max=100))


class CommentUpdateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    content = fields.String(validate=validate.Length(min=1))
    author = fields.String(validate=validate.Length(min=1, max=100))


class CommentSchema(Schema):
    """Public representation of a comment."""

    id = fields.Integer(required=True)
    post_id = fields.Integer(required=True)
    content = fields.String(required=True)
    author = fields.String(required=True)
    owner_id = fields.Integer(required=True)
    created_at = fields.DateTime(allow_none=True)
