"""
JSON error handlers shared by every blueprint.
"""
from flask import jsonify
from werkzeug.exceptions import HTTPException
import logging

from services.exceptions import SkillForgeError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Map domain errors to HTTP status codes."""

    @app.errorhandler(SkillForgeError)
    def handle_domain_error(e: SkillForgeError):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__}: {e}")
        else:
            logger.info(f"{type(e).__name__}: {e}")
        return jsonify({'success': False, 'error': str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({'success': False, 'error': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.exception(f"Unhandled error: {e}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500
