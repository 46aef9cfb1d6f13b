"""Application Flask extensions.

This module initializes and configures all Flask extensions used in the application.
"""

import logging
from typing import cast

from flask import Flask, current_app, jsonify, request
from flask.wrappers import Response
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager, UserMixin
from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)

# Initialize SQLAlchemy
db = SQLAlchemy()

# Initialize LoginManager; principals come from a trusted gateway header, never a session
login_manager = LoginManager()

# Initialize rate limiter to prevent abuse
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["400 per day", "100 per hour"],
)

MAX_PRINCIPAL_ID_LENGTH = 128


class Principal(UserMixin):
    """Authenticated caller as asserted by the upstream gateway.

    Only an opaque string id is known about the caller.
    """

    def __init__(self, user_id: str) -> None:
        self.id = user_id

    def __repr__(self) -> str:
        return f"<Principal {self.id}>"


@login_manager.request_loader
def load_principal_from_request(req) -> Principal | None:
    """Resolve the principal from the configured trusted header."""
    header_name = current_app.config.get("PRINCIPAL_HEADER", "X-User-Id")
    user_id = (req.headers.get(header_name) or "").strip()
    if not user_id or len(user_id) > MAX_PRINCIPAL_ID_LENGTH:
        return None
    return Principal(user_id)


@login_manager.unauthorized_handler
def unauthorized() -> Response:
    """Handle unauthorized requests with a 401 JSON response."""
    current_app.logger.warning(f"Unauthenticated request to {request.path}")
    response = jsonify({"status": "error", "message": "Authentication required", "code": 401})
    response.status_code = 401
    return cast(Response, response)


def init_app(app: Flask) -> None:
    """Initialize all extensions with the Flask application."""
    db.init_app(app)
    login_manager.init_app(app)

    app.config.setdefault("RATELIMIT_STORAGE_URI", "memory://")
    limiter.init_app(app)

    app.logger.info(f"Principal header: {app.config.get('PRINCIPAL_HEADER', 'X-User-Id')}")
