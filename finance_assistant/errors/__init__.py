"""JSON error handlers for the application."""

from __future__ import annotations

from typing import cast

from flask import Blueprint, Flask, Response, current_app, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from finance_assistant.ingest.exceptions import IngestionError

bp = Blueprint("errors", __name__)


def init_app(app: Flask) -> None:
    """Initialize error handlers with the Flask application."""
    app.register_blueprint(bp)


def _create_error_response(message: str, status_code: int, **extra: object) -> Response:
    """Create a standardized JSON error response."""
    payload = {"status": "error", "message": message, "code": status_code}
    payload.update(extra)
    response = jsonify(payload)
    response.status_code = status_code
    return cast(Response, response)


@bp.app_errorhandler(RequestEntityTooLarge)
def file_too_large(error: RequestEntityTooLarge) -> Response:
    """Handle uploads above MAX_CONTENT_LENGTH."""
    limit_mb = (current_app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
    return _create_error_response(f"File too large. Maximum size is {limit_mb}MB.", 413)


@bp.app_errorhandler(IngestionError)
def handle_ingestion_error(error: IngestionError) -> Response:
    """Handle failures that abort processing of an upload."""
    if error.status_code >= 500:
        current_app.logger.error(f"Ingestion failed: {error.message}")
    else:
        current_app.logger.warning(f"Upload rejected: {error.message}")
    return _create_error_response(error.message, error.status_code, error_type=error.code)


@bp.app_errorhandler(HTTPException)
def handle_http_exception(error: HTTPException) -> Response:
    """Handle HTTP exceptions."""
    status_code = error.code if error.code is not None else 500
    return _create_error_response(error.description or "HTTP error occurred", status_code)


@bp.app_errorhandler(Exception)
def handle_exception(error: Exception) -> Response:
    """Handle all unhandled exceptions."""
    current_app.logger.error(f"Unhandled exception: {str(error)}", exc_info=True)
    return _create_error_response("An unexpected error occurred", 500)
