import logging

from flask import Flask
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from hashvault.config import Config
from hashvault.errors import ApiError
from hashvault.routes import content_bp, references_bp
from hashvault.services import init_services
from hashvault.utils import error_response

logger = logging.getLogger(__name__)

BLUEPRINTS = {
    'content': content_bp,
    'references': references_bp,
}

SERVER_ERROR_MESSAGE = 'Something went wrong on the server.'


def create_app(config_overrides=None, components=('content', 'references'), **collaborators):
    """
    Create the Flask application.

    Args:
        config_overrides: Values merged over Config into app.config
        components: Which services to mount: 'content', 'references' or both
        **collaborators: byte_store, identity_provider, repository_directory
            and content_lookup to use instead of the configured ones

    Returns:
        Flask app
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    for component in components:
        if component not in BLUEPRINTS:
            raise ValueError(f"Unknown component: {component}")
        app.register_blueprint(BLUEPRINTS[component])

    register_error_handlers(app)
    init_services(app, **collaborators)
    return app


def register_error_handlers(app: Flask):
    """Render every error as the standard envelope"""

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        if error.status_code < 500:
            logger.warning(f"{error.code}: {error.message}")
            return error_response(error.message, error.code, error.details, error.status_code)

        logger.error(f"{error.code}: {error.message}", exc_info=True)
        if app.config.get('DEBUG'):
            return error_response(error.message, error.code, error.details, error.status_code)
        return error_response(SERVER_ERROR_MESSAGE, error.code, None, error.status_code)

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        details = [
            {'field': '.'.join(str(part) for part in err['loc']), 'message': err['msg']}
            for err in error.errors()
        ]
        logger.warning(f"Invalid request body: {details}")
        return error_response('Invalid request body.', 'BAD_REQUEST', details, 400)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error: IntegrityError):
        logger.warning(f"Integrity error: {error.orig}")
        return error_response('Resource already exists.', 'CONFLICT', None, 409)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        code = error.name.upper().replace(' ', '_')
        logger.warning(f"{error.code} {error.name}: {error.description}")
        return error_response(error.description, code, None, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.error(f"Unhandled error: {error}", exc_info=True)
        message = str(error) if app.config.get('DEBUG') else SERVER_ERROR_MESSAGE
        return error_response(message, 'SERVER_ERROR', None, 500)
