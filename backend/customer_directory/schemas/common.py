"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate


def split_sort(raw: str | None) -> list[str]:
    """Split a comma-separated ``sort`` parameter into tokens."""
    return [segment.strip() for segment in (raw or "").split(",") if segment.strip()]


class PaginationQuerySchema(Schema):
    """Validate pagination parameters with configurable defaults."""

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, default_limit: int = 100, max_limit: int = 200, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))
    sort = fields.String(load_default="")

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data["sort"] = split_sort(data.get("sort"))
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        data.setdefault("page", 1)
        return data


class PaginationMetaSchema(Schema):
    """``pagination`` block for list responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    total_pages = fields.Integer(required=True, data_key="totalPages")


def build_pagination(*, total: int, page: int, limit: int) -> dict[str, int]:
    """Return a serialized ``pagination`` mapping."""

    total_pages = -(-int(total) // int(limit)) if limit else 0
    return PaginationMetaSchema().dump(
        {"total": total, "page": page, "limit": limit, "total_pages": total_pages}
    )
