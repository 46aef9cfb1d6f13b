from __future__ import annotations

from typing import Any, Tuple

from flask import Response, current_app, jsonify, request
from flask_login import current_user, login_required
from marshmallow import ValidationError

from finance_assistant.categories import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    get_category_store,
)
from finance_assistant.extensions import limiter

from . import bp
from . import services
from .schemas import CategoryInputSchema, CategoryUpdateSchema, CustomCategorySchema, TransactionSchema

REQUIRED_TRANSACTION_FIELDS = ("amount", "description", "date")

category_input_schema = CategoryInputSchema()
category_update_schema = CategoryUpdateSchema()
custom_category_schema = CustomCategorySchema()
custom_categories_schema = CustomCategorySchema(many=True)
transaction_schema = TransactionSchema()


def _current_user_id() -> str:
    return str(current_user.id)


def _upload_rate_limit() -> str:
    return str(current_app.config.get("UPLOAD_RATE_LIMIT", "30 per minute"))


def _create_api_response(
    data: Any = None, message: str = "Success", status: str = "success", code: int = 200
) -> Tuple[Response, int]:
    """Create a standardized API response."""
    response_data = {"status": status, "message": message}
    if data is not None:
        response_data["data"] = data
    return jsonify(response_data), code


def _handle_validation_error(error: ValidationError) -> Tuple[Response, int]:
    """Handle validation errors consistently."""
    return (
        jsonify({"status": "error", "message": "Validation failed", "errors": error.messages, "code": 400}),
        400,
    )


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


# Uploads
@bp.route("/upload", methods=["POST"])
@login_required
@limiter.limit(_upload_rate_limit)
def upload_file() -> Tuple[Response, int]:
    """Process an uploaded receipt image, CSV export or PDF statement."""
    file = request.files.get("file")
    if file is None or not file.filename:
        return _create_api_response(message="No file uploaded", status="error", code=400)

    payload = services.process_upload(file.content_type, file.filename, file.read())
    message = payload.pop("message")
    return _create_api_response(data=payload, message=message)


@bp.route("/upload/bulk-import", methods=["POST"])
@login_required
def bulk_import() -> Tuple[Response, int]:
    """Import every transaction from a parsed upload."""
    transactions = _json_body().get("transactions")
    if not isinstance(transactions, list) or not transactions:
        return _create_api_response(message="No transactions provided", status="error", code=400)

    result = services.import_transactions_for_user(_current_user_id(), enumerate(transactions))
    return _create_api_response(data=result, message=f"Successfully imported {result['imported']} transactions")


@bp.route("/upload/selective-import", methods=["POST"])
@login_required
def selective_import() -> Tuple[Response, int]:
    """Import the chosen subset of a parsed upload."""
    body = _json_body()
    transactions = body.get("transactions")
    selected_indices = body.get("selectedIndices")
    if not isinstance(transactions, list) or not isinstance(selected_indices, list):
        return _create_api_response(message="Invalid data format", status="error", code=400)

    records = services.select_records(transactions, selected_indices)
    if not records:
        return _create_api_response(message="No transactions selected", status="error", code=400)

    result = services.import_transactions_for_user(_current_user_id(), records)
    return _create_api_response(
        data=result,
        message=f"Successfully imported {result['imported']} out of {len(records)} selected transactions",
    )


@bp.route("/upload/add-single", methods=["POST"])
@login_required
def add_single() -> Tuple[Response, int]:
    """Add one reviewed transaction, typically a receipt suggestion."""
    body = _json_body()
    if any(not body.get(field) for field in REQUIRED_TRANSACTION_FIELDS):
        return _create_api_response(
            message="Missing required fields: amount, description, or date", status="error", code=400
        )

    try:
        transaction = services.add_transaction_for_user(_current_user_id(), body)
    except ValidationError as e:
        return _handle_validation_error(e)

    return _create_api_response(
        data=transaction_schema.dump(transaction), message="Transaction added successfully", code=201
    )


# Categories
@bp.route("/categories", methods=["GET"])
@login_required
def get_categories() -> Tuple[Response, int]:
    """Get default and custom categories for the current user."""
    categories = get_category_store().get_all(_current_user_id())
    categories["custom"] = {
        kind: custom_categories_schema.dump(entries) for kind, entries in categories["custom"].items()
    }
    return _create_api_response(data=categories, message="Categories retrieved successfully")


@bp.route("/categories/usage", methods=["GET"])
@login_required
def get_category_usage() -> Tuple[Response, int]:
    """Get transaction counts and amounts per category for the current user."""
    usage = services.get_category_usage(_current_user_id())
    return _create_api_response(data={"categoryUsage": usage}, message="Category usage retrieved successfully")


@bp.route("/categories", methods=["POST"])
@login_required
def create_category() -> Tuple[Response, int]:
    """Create a custom category."""
    try:
        data = category_input_schema.load(_json_body())
    except ValidationError as e:
        return _handle_validation_error(e)

    try:
        category = get_category_store().create(
            _current_user_id(), data["name"], data["type"], color=data.get("color"), icon=data.get("icon")
        )
    except DuplicateCategoryError as e:
        return _create_api_response(message=str(e), status="error", code=400)

    return _create_api_response(
        data=custom_category_schema.dump(category), message="Category created successfully", code=201
    )


@bp.route("/categories/<category_id>", methods=["PUT"])
@login_required
def update_category(category_id: str) -> Tuple[Response, int]:
    """Update a custom category."""
    try:
        data = category_update_schema.load(_json_body())
    except ValidationError as e:
        return _handle_validation_error(e)

    try:
        category = get_category_store().update(
            _current_user_id(), category_id, name=data.get("name"), color=data.get("color"), icon=data.get("icon")
        )
    except CategoryNotFoundError as e:
        return _create_api_response(message=str(e), status="error", code=404)
    except DuplicateCategoryError as e:
        return _create_api_response(message=str(e), status="error", code=400)

    return _create_api_response(data=custom_category_schema.dump(category), message="Category updated successfully")


@bp.route("/categories/<category_id>", methods=["DELETE"])
@login_required
def delete_category(category_id: str) -> Tuple[Response, int]:
    """Delete a custom category."""
    try:
        get_category_store().delete(_current_user_id(), category_id)
    except CategoryNotFoundError as e:
        return _create_api_response(message=str(e), status="error", code=404)

    return _create_api_response(message="Category deleted successfully")
