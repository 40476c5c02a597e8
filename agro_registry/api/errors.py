# agro_registry/api/errors.py
# Defines custom application exceptions and Flask error handlers.

from enum import Enum

from flask import jsonify, request
from werkzeug.exceptions import HTTPException
from agro_registry.utils.logger import logger

# --- Custom Application Exceptions ---

class ApiError(Exception):
    """Base class for custom API errors."""
    status_code = 500
    message = "An internal server error occurred."

    def __init__(self, message=None, status_code=None, payload=None):
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload # Optional additional data

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['error'] = self.message
        return rv

    def __str__(self):
        return self.message

class ValidationKind(str, Enum):
    """Sub-kinds of ValidationError exposed to callers."""
    INVALID_DOCUMENT = "InvalidDocument"
    DUPLICATE_DOCUMENT = "DuplicateDocument"
    AREA_INVARIANT_VIOLATED = "AreaInvariantViolated"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    INVALID_FILTER = "InvalidFilter"

class ValidationError(ApiError):
    """Indicates invalid data provided by the client. Always raised before any mutation."""
    status_code = 400
    message = "Validation failed."

    def __init__(self, message=None, kind: ValidationKind = ValidationKind.MISSING_REQUIRED_FIELD, payload=None):
        super().__init__(message, payload=payload)
        self.kind = kind

    def to_dict(self):
        rv = super().to_dict()
        rv['kind'] = self.kind.value
        return rv

class NotFoundError(ApiError):
    """Indicates a requested resource was not found."""
    status_code = 404
    message = "The requested resource was not found."

class ServiceError(ApiError):
     """Indicates a general error within a service layer operation."""
     status_code = 500
     message = "A service error occurred."

class DatabaseError(ApiError):
    """Indicates an error during a database operation."""
    status_code = 500
    message = "A database error occurred."

class InfrastructureError(ApiError):
    """Indicates the primary store could not be reached."""
    status_code = 503
    message = "The primary data store is unavailable."

class ConfigurationError(ApiError):
     """Indicates a problem with the application's configuration."""
     status_code = 500
     message = "Application configuration error."


# --- Flask Error Handlers ---

def register_error_handlers(app):
    """Registers custom error handlers with the Flask app."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        """Handler for custom ApiError exceptions."""
        logger.warning(f"API Error Handled: {type(error).__name__} - Status: {error.status_code} - Msg: {error.message}")
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        """Handler for standard werkzeug HTTPExceptions (like 404, 405)."""
        logger.warning(f"HTTP Exception Handled: {error.code} {error.name} - Path: {request.path} - Msg: {error.description}")
        response = jsonify({"error": f"{error.name}: {error.description}"})
        response.status_code = error.code
        return response

    @app.errorhandler(Exception)
    def handle_generic_exception(error):
        """Handler for any other unhandled exceptions."""
        logger.error(f"Unhandled Exception: {error}", exc_info=True)
        response = jsonify({"error": "An unexpected internal server error occurred."})
        response.status_code = 500
        return response

    logger.info("Custom error handlers registered.")
