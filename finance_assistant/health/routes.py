"""Health check endpoints for the application."""

from datetime import UTC, datetime
import logging
from typing import cast

from flask import Response, current_app, jsonify
from sqlalchemy import text

from finance_assistant._version import __version__
from finance_assistant.extensions import db

from . import bp

logger = logging.getLogger(__name__)


@bp.route("/")
def check() -> Response:
    """Health check endpoint to verify the application and database are running.

    Returns:
        JSON: Status, version, OCR availability and database connectivity
    """
    try:
        db.session.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error(f"Database connection error: {str(e)}")
        db_status = f"error: {str(e)}"

    return cast(
        Response,
        jsonify(
            {
                "status": "ok",
                "version": __version__,
                "timestamp": datetime.now(UTC).isoformat(),
                "database": db_status,
                "ocr_enabled": bool(current_app.config.get("OCR_ENABLED", True)),
            }
        ),
    )
