# utils/errors.py
import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Error with an HTTP status and a machine-readable code."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(AppError):
    status_code = 404
    default_code = "NOT_FOUND"


class PreconditionFailedError(AppError):
    status_code = 400
    default_code = "PRECONDITION_FAILED"


def _error_response(status: int, code: str, message: str):
    return jsonify({"success": False, "error": {"code": code, "message": message}}), status


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        return _error_response(err.status_code, err.code, err.message)

    @app.errorhandler(ValueError)
    def handle_value_error(err: ValueError):
        return _error_response(400, "VALIDATION_ERROR", str(err))

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        code = (err.name or "HTTP_ERROR").upper().replace(" ", "_")
        return _error_response(err.code or 500, code, err.description or err.name)

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        logger.exception("Persistence failure")
        return _error_response(500, "PERSISTENCE_FAILURE", "Database operation failed")
