from http import HTTPStatus

from flask import jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


class ApiError(Exception):
    """
    Excepción genérica para errores de negocio.
    """
    status_code = 400

    def __init__(self, message, status_code=None, errors=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or {}
        self.payload = payload or {}


class BadRequestError(ApiError):
    status_code = 400


class UnauthorizedError(ApiError):
    status_code = 401


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class StorageError(ApiError):
    status_code = 500


def error_body(message: str, status_code: int, errors=None) -> dict:
    body = {
        "success": False,
        "error": _reason(status_code),
        "message": message,
    }
    if errors:
        body["errors"] = errors
    return body


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if err.status_code >= 500:
            app.logger.error("ApiError %s: %s", err.status_code, err.message)
        response = error_body(err.message, err.status_code, err.errors)
        if getattr(err, "payload", None):
            response["payload"] = err.payload

        return jsonify(response), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err: ValidationError):
        errors = err.messages if hasattr(err, "messages") else str(err)
        message = "Datos inválidos"
        if isinstance(errors, dict) and errors.get("_schema"):
            message = "; ".join(str(m) for m in errors["_schema"])
        return jsonify(error_body(message, 400, errors)), 400

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        app.logger.warning("IntegrityError: %s", err.orig)
        return jsonify(error_body("El registro ya existe o viola una restricción", 409)), 409

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = err.code or 500
        return jsonify(error_body(err.description or "Error HTTP", code)), code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Traza completa solo en el log del servidor
        app.logger.exception(err)

        return jsonify(error_body("Error interno del servidor", 500)), 500


def register_jwt_handlers(jwt):
    """Respuestas 401 con el mismo sobre JSON que el resto de la API."""

    def _unauthorized(message: str):
        return jsonify(error_body(message, 401)), 401

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthorized("Unauthorized: Missing or invalid token")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _unauthorized("Unauthorized: Invalid token")

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _unauthorized("Unauthorized: Token expired")

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return _unauthorized("Unauthorized: Token revoked")
