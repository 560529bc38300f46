"""Public profile schema (never carries the password digest)."""

from __future__ import annotations

from marshmallow import Schema, fields


class UserSchema(Schema):
    """Profile returned by ``GET /auth/whoami``."""

    id = fields.Integer(dump_only=True)
    username = fields.String(dump_only=True)
    email = fields.Email(dump_only=True)
    bio = fields.String(dump_only=True, dump_default="")
    profile_image = fields.String(dump_only=True, dump_default="")
