"""Pytest configuration and fixtures for the test suite."""

import os
from pathlib import Path
import sys
from typing import Generator

from flask import Flask
from flask.testing import FlaskClient, FlaskCliRunner
import pytest

# Add the project root to the Python path first to avoid import issues
project_root = str(Path(__file__).parent.parent)
sys.path.insert(0, project_root)

# Set test environment variables before the configuration module is imported
os.environ.update(
    {
        "FLASK_ENV": "testing",
        "FLASK_APP": "finance_assistant",
        "SECRET_KEY": "test-secret-key",
        "TESTING": "True",
    }
)

from finance_assistant import create_app  # noqa: E402
from finance_assistant.extensions import db  # noqa: E402

TEST_USER_ID = "user-123"
OTHER_USER_ID = "user-456"


@pytest.fixture(scope="function")
def app(tmp_path: Path) -> Generator[Flask, None, None]:
    """Create and configure a new app instance for testing.

    This fixture is function-scoped to ensure a clean database and category
    store for each test.
    """
    app = create_app()
    app.config.update(
        TESTING=True,
        UPLOAD_FOLDER=str(tmp_path / "uploads"),
    )

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_context(app: Flask) -> Generator[None, None, None]:
    """Push an application context for tests that call app code outside a request."""
    with app.app_context():
        yield


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a test client for the application."""
    return app.test_client()


@pytest.fixture
def runner(app: Flask) -> FlaskCliRunner:
    """Create a CLI runner for testing Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def auth_headers(app: Flask) -> dict[str, str]:
    """Headers identifying the test principal, as set by the upstream gateway."""
    return {app.config["PRINCIPAL_HEADER"]: TEST_USER_ID}


@pytest.fixture
def other_auth_headers(app: Flask) -> dict[str, str]:
    """Headers identifying a second principal."""
    return {app.config["PRINCIPAL_HEADER"]: OTHER_USER_ID}
