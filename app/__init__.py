import logging
import os

import newrelic.agent
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from app.config import config
from app.extensions import cache, cors, db, migrate

# Load environment variables
load_dotenv()


def create_app(config_name=None, config_object=None):
    """Application factory pattern."""
    if config_object is not None:
        app_config = config_object
    else:
        config_name = config_name or os.environ.get("FLASK_ENV", "development")
        app_config_class = config.get(config_name, config["default"])
        app_config = app_config_class()

    app = Flask(__name__)
    app.config.from_object(app_config)

    # Set up logging
    if __name__ != "__main__":
        gunicorn_logger = logging.getLogger("gunicorn.error")
        if gunicorn_logger.handlers:
            app.logger.handlers = gunicorn_logger.handlers
            app.logger.setLevel(gunicorn_logger.level)

    if not app.config.get("TESTING", False):
        missing_vars = app_config.validate_required_vars()
        if missing_vars:
            app.logger.warning(f"Missing environment variables: {', '.join(missing_vars)}")

    # Initialize extensions
    cors.init_app(app)
    cache.init_app(app)
    db.init_app(app)
    migrate.init_app(app, db)

    # Models must be imported before create_all / autogenerate
    from app import models  # noqa: F401

    # Register blueprints
    from app.api import init_app as init_api
    init_api(app)

    # Register middleware and error handlers
    register_middleware(app)
    register_error_handlers(app)

    return app


def register_middleware(app):
    """Register application middleware."""

    @app.before_request
    def capture_request_attributes():
        """Attach request attributes to the monitoring transaction."""
        if not app.config.get("DEBUG", False):
            newrelic.agent.add_custom_attribute("request.method", request.method)
            newrelic.agent.add_custom_attribute("request.path", request.path)


def register_error_handlers(app):
    """Register error handlers."""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle HTTP exceptions."""
        response = jsonify({
            "success": False,
            "error": e.description,
        })
        response.status_code = e.code or 500
        return response

    @app.errorhandler(Exception)
    def handle_unhandled_exception(e):
        """Handle unhandled exceptions."""
        newrelic.agent.notice_error(error=(type(e), e, e.__traceback__))
        app.logger.error(f"Unhandled exception: {str(e)}", exc_info=True)
        body = {
            "success": False,
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later.",
        }
        if app.config.get("EXPOSE_ERROR_DETAILS", False):
            body["details"] = str(e)
        response = jsonify(body)
        response.status_code = 500
        return response
