import logging

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_config

from ._version import __version__

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

__all__ = ["create_app", "__version__"]


def create_app() -> Flask:
    """Create and configure the Flask application.

    The configuration is determined by the FLASK_ENV environment variable.

    Returns:
        Flask: The configured Flask application instance.
    """
    config = get_config()

    app = Flask(__name__)
    app.config.from_object(config)

    _configure_app_settings(app)
    _configure_logging(app)
    _initialize_components(app)
    _initialize_cli(app)

    return app


def _configure_app_settings(app: Flask) -> None:
    """Configure basic application settings and validation."""
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise ValueError("SQLALCHEMY_DATABASE_URI is not configured")

    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)


def _configure_logging(app: Flask) -> None:
    """Configure application logging."""
    log_level = logging.DEBUG if app.debug else logging.INFO
    logger.setLevel(log_level)
    app.logger.setLevel(log_level)

    logger.debug("Application configuration:")
    logger.debug(f"- ENVIRONMENT: {app.config.get('ENVIRONMENT', 'Not set')}")
    logger.debug(f"- DEBUG: {app.debug}")
    logger.debug(f"- OCR_ENABLED: {app.config.get('OCR_ENABLED')}")
    logger.debug(f"- UPLOAD_FOLDER: {app.config.get('UPLOAD_FOLDER')}")


def _initialize_components(app: Flask) -> None:
    """Initialize core application components."""
    from .categories import CustomCategoryStore
    from .errors import init_app as init_errors
    from .extensions import db
    from .extensions import init_app as init_extensions

    init_extensions(app)

    # Import models so their tables are registered before create_all
    from .transactions import models  # noqa: F401

    with app.app_context():
        db.create_all()

    app.extensions["category_store"] = CustomCategoryStore()

    _register_blueprints(app)

    init_errors(app)
    logger.debug("Registered error handlers")

    _configure_cors(app)
    _log_registered_routes(app)


def _initialize_cli(app: Flask) -> None:
    """Initialize CLI commands."""
    from .cli import register_commands

    register_commands(app)
    logger.debug("Initialized CLI commands")


def _register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from .api import bp as api_bp
    from .health import bp as health_bp

    blueprint_configs = [
        (api_bp, "/api/v1"),
        (health_bp, "/health"),
    ]

    for bp, url_prefix in blueprint_configs:
        app.register_blueprint(bp, url_prefix=url_prefix)
        logger.debug(f"Registered blueprint: {bp.name} at {url_prefix}")


def _configure_cors(app: Flask) -> None:
    """Configure CORS for the API."""
    CORS(
        app,
        resources={
            r"/api/*": {
                "origins": app.config["CORS_ORIGINS"].split(","),
                "methods": app.config["CORS_METHODS"].split(","),
                "allow_headers": app.config["CORS_ALLOW_HEADERS"].split(","),
                "expose_headers": ["Content-Length"],
                "supports_credentials": False,
            }
        },
    )


def _log_registered_routes(app: Flask) -> None:
    """Log all registered routes for debugging."""
    logger.debug("Registered routes:")
    for rule in app.url_map.iter_rules():
        methods = list(rule.methods - {"OPTIONS", "HEAD"})
        logger.debug(f"  {rule.endpoint}: {rule.rule} {methods}")
