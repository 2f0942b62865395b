"""Customer endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from customer_directory.api.deps import (
    customer_service,
    envelope,
    json_payload,
    optional_auth,
    require_auth,
    timing,
)
from customer_directory.schemas import CustomerListQuerySchema, CustomerSchema, build_pagination
from customer_directory.services.customers import CustomerListIn

bp = Blueprint("customers", __name__, url_prefix="/customers")

customer_schema = CustomerSchema()
customer_list_schema = CustomerSchema(many=True)
list_query_schema = CustomerListQuerySchema(default_limit=100, max_limit=200)


@bp.get("")
@optional_auth
@timing
def list_customers():
    """Return customers filtered by exact username/email, newest first."""

    query = list_query_schema.load(request.args)
    result = customer_service().list_customers(
        CustomerListIn(
            username=query["username"],
            email=query["email"],
            page=query["page"],
            limit=query["limit"],
            sort=tuple(query["sort"]),
        )
    )
    data = {
        "customers": customer_list_schema.dump(result.items),
        "pagination": build_pagination(total=result.total, page=result.page, limit=result.limit),
    }
    return envelope("Customers retrieved successfully", data)


@bp.get("/<customer_id>")
@optional_auth
@timing
def get_customer(customer_id: str):
    """Return a single customer."""

    customer = customer_service().get_customer(customer_id)
    return envelope("Customer retrieved successfully", {"customer": customer_schema.dump(customer)})


@bp.post("")
@require_auth
@timing
def create_customer():
    """Create a customer through the uniqueness-checked path."""

    customer = customer_service().create_customer(json_payload())
    return envelope(
        "Customer created successfully",
        {"customer": customer_schema.dump(customer)},
        status=201,
    )


@bp.route("/<customer_id>", methods=["PUT", "PATCH"])
@require_auth
@timing
def update_customer(customer_id: str):
    """Partially update a customer."""

    customer = customer_service().update_customer(customer_id, json_payload())
    return envelope("Customer updated successfully", {"customer": customer_schema.dump(customer)})


@bp.delete("/<customer_id>")
@require_auth
@timing
def delete_customer(customer_id: str):
    """Delete a customer."""

    customer_service().delete_customer(customer_id)
    return envelope("Customer deleted successfully")
