"""Customer resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from customer_directory.schemas.common import PaginationQuerySchema


class CustomerSchema(Schema):
    """Public representation of a customer. ``password_hash`` is never exposed."""

    id = fields.String(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    first_name = fields.String(required=True)
    last_name = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)


class CustomerListQuerySchema(PaginationQuerySchema):
    """Supported query parameters for listing customers."""

    username = fields.String(load_default=None, validate=validate.Length(min=1, max=20))
    email = fields.String(load_default=None, validate=validate.Length(min=1, max=254))
