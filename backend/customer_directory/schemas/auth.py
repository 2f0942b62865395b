"""Authentication schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from customer_directory.schemas.customer import CustomerSchema


class TokenPairSchema(Schema):
    """Access/refresh token pair using the public camelCase keys."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")


class AuthResultSchema(TokenPairSchema):
    """Register/login payload: the customer plus a fresh token pair."""

    user = fields.Nested(CustomerSchema, required=True)


class TokenClaimsSchema(Schema):
    """Identity claim set echoed by ``/auth/verify``."""

    id = fields.String(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
