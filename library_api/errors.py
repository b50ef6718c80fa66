# library_api/errors.py
from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from enum import Enum

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException


class ErrorKind(str, Enum):
    MISSING_HEADER = "MissingHeader"
    INVALID_ROLE = "InvalidRole"
    INVALID_IDENTITY = "InvalidIdentity"
    FORBIDDEN = "Forbidden"
    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFound"
    OUT_OF_STOCK = "OutOfStock"
    TRANSACTION_FAILURE = "TransactionFailure"
    CONFLICT = "ConflictError"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    INTERNAL = "InternalError"


STATUS_CODES = {
    ErrorKind.MISSING_HEADER: 400,
    ErrorKind.INVALID_ROLE: 400,
    ErrorKind.INVALID_IDENTITY: 400,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.OUT_OF_STOCK: 400,
    ErrorKind.TRANSACTION_FAILURE: 500,
    ErrorKind.CONFLICT: 409,
    ErrorKind.METHOD_NOT_ALLOWED: 405,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class AppError:
    """
    Servis katmanının döndürdüğü hata değeri (raise edilmez).
    Servisler `(value, error)` döner; HTTP'ye çevirme sadece controller'da yapılır.
    """
    kind: ErrorKind
    message: str
    details: list | None = field(default=None)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def to_dict(self) -> dict:
        body = {"success": False, "error": self.kind.value, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


def error_response(err: AppError):
    return jsonify(err.to_dict()), err.status_code


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        # RequestRedirect vs. (3xx) olduğu gibi kalsın
        if e.code is None or e.code < 400:
            return e
        if e.code == 404:
            err = AppError(ErrorKind.NOT_FOUND, f"Route not found: {request.method} {request.path}")
        elif e.code == 405:
            err = AppError(ErrorKind.METHOD_NOT_ALLOWED, f"Method not allowed: {request.method} {request.path}")
        elif e.code == 400:
            # bozuk JSON vs.
            err = AppError(ErrorKind.VALIDATION, "Malformed request body")
        else:
            body = {"success": False, "error": e.name, "message": e.description}
            return jsonify(body), e.code
        return error_response(err)

    @app.errorhandler(Exception)
    def _unexpected_error(e: Exception):
        app.logger.exception(f"[errors] Unhandled error on {request.method} {request.path}: {e}")

        body = AppError(ErrorKind.INTERNAL, "Internal Server Error").to_dict()
        if current_app.config.get("EXPOSE_ERROR_DETAILS"):
            body["details"] = str(e)
            body["stack"] = traceback.format_exception(type(e), e, e.__traceback__)
        return jsonify(body), 500
