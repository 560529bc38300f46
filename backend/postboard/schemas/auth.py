"""Authentication-related Marshmallow schemas.

Input schemas only shape the payload; presence checks live in the auth
service so that each endpoint can answer with its own status code.
"""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, pre_load


class _AuthInput(Schema):
    class Meta:
        unknown = EXCLUDE


class RegisterSchema(_AuthInput):
    """Input payload for account registration."""

    username = fields.String(load_default=None)
    email = fields.String(load_default=None)
    password = fields.String(load_default=None)


class LoginSchema(_AuthInput):
    """Input payload for authenticating a user."""

    email = fields.String(load_default=None)
    password = fields.String(load_default=None)


class RefreshTokenSchema(_AuthInput):
    """
    Input payload for refresh and logout.

    The camelCase ``refreshToken`` key of older clients is accepted when
    ``refresh_token`` is absent.
    """

    refresh_token = fields.String(load_default=None)

    @pre_load
    def _accept_camel_case(self, data, **kwargs):
        if isinstance(data, dict) and "refresh_token" not in data and "refreshToken" in data:
            data = {**data, "refresh_token": data["refreshToken"]}
        return data


class SessionResponseSchema(Schema):
    """Response payload for a freshly issued token pair."""

    user_id = fields.Integer(required=True)
    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")


class RegisterResponseSchema(Schema):
    """Response payload for registration: the new id plus its first session."""

    id = fields.Integer(required=True)
    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")
