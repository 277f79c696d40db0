"""Flask application entry point."""

import logging
import re
import sqlite3

from flask import Flask, jsonify
from flask_cors import CORS

from .auth.service import AuthService
from .config import settings
from .db import get_core, init_db
from .exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateUserError,
    InvalidCredentialsError,
    NeighborFitError,
    ResourceNotFound,
    ValidationError,
)
from .utils import isodatetime

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Create Flask app
app = Flask(__name__)

# CORS: fixed allow-list plus preview deployments matching the regex
CORS(
    app,
    origins=[*settings.cors_origins, re.compile(settings.cors_origin_regex)],
    supports_credentials=True
)

# Signing secret and work factor are read once here and never change
app.extensions["auth_service"] = AuthService.from_settings(settings)


# Database initialization (runs once on app startup)
def initialize_database():
    """Initialize database on app startup."""
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


with app.app_context():
    initialize_database()


# Error handlers
def _error_response(error: NeighborFitError, status: int, include_details: bool = True):
    response = {
        "error": {
            "type": error.__class__.__name__,
            "message": error.message
        }
    }
    if include_details and error.details:
        response["error"]["details"] = error.details
    return jsonify(response), status


@app.errorhandler(ValidationError)
def handle_validation_error(error):
    """Handle ValidationError exceptions."""
    return _error_response(error, 400)


@app.errorhandler(DuplicateUserError)
def handle_duplicate_user(error):
    """Handle DuplicateUserError exceptions."""
    return _error_response(error, 400)


@app.errorhandler(InvalidCredentialsError)
def handle_invalid_credentials(error):
    """Handle InvalidCredentialsError exceptions.

    No details: the response must not reveal which credential was wrong.
    """
    return _error_response(error, 400, include_details=False)


@app.errorhandler(AuthenticationError)
def handle_authentication_error(error):
    """Handle AuthenticationError exceptions."""
    return _error_response(error, 401)


@app.errorhandler(ResourceNotFound)
def handle_not_found(error):
    """Handle ResourceNotFound exceptions."""
    return _error_response(error, 404)


@app.errorhandler(DatabaseError)
def handle_database_error(error):
    """Handle DatabaseError exceptions. Details only in development."""
    return _error_response(error, 500, include_details=settings.is_development)


@app.errorhandler(NeighborFitError)
def handle_neighborfit_error(error):
    """Handle any other NeighborFitError exceptions."""
    return _error_response(error, 500, include_details=settings.is_development)


@app.errorhandler(500)
def handle_internal_error(error):
    """Handle internal server errors."""
    logger.error(f"Internal error: {error}")
    response = {
        "error": {
            "type": "InternalServerError",
            "message": "An internal error occurred"
        }
    }
    original = getattr(error, "original_exception", None)
    if settings.is_development and original is not None:
        response["error"]["details"] = {"reason": str(original)}
    return jsonify(response), 500


@app.route("/")
def index():
    """Root route."""
    return "NeighborFit API is running"


@app.route(f"{settings.api_prefix}/health")
def health():
    """
    Health check: pings the database.

    Returns 200 with status "OK" when the database answers, 500 with
    status "ERROR" otherwise.
    """
    schema_version = None
    try:
        core = get_core()
        try:
            schema_version = core.ping()
        finally:
            core.close()
        db_ping = "success"
    except (sqlite3.Error, OSError) as e:
        logger.error(f"Health check database ping failed: {e}")
        db_ping = f"ping_failed: {e}"

    is_healthy = db_ping == "success"

    return jsonify({
        "status": "OK" if is_healthy else "ERROR",
        "database": {
            "state": "connected" if is_healthy else "disconnected",
            "ping": db_ping,
            "schema_version": schema_version
        },
        "environment": {
            "environment": settings.environment,
            "jwt_secret_configured": settings.jwt_secret_key != "change-me-in-production-use-env-var"
        },
        "timestamp": isodatetime.now()
    }), 200 if is_healthy else 500


# Register API blueprints
from .auth.api import auth_bp

app.register_blueprint(auth_bp, url_prefix=f"{settings.api_prefix}/auth")


if __name__ == "__main__":
    app.run(port=settings.port, debug=settings.is_development)
