# propdesk/errors.py
from enum import Enum

from flask import jsonify


class PropDeskError(Exception):
    """Base error; rendered as {"error": slug, "message": text}."""

    status_code = 500
    error = "server_error"

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.message = message or self.error
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class ValidationError(PropDeskError):
    status_code = 400
    error = "validation_error"

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message, "errors": self.errors}


class NotFoundError(PropDeskError):
    status_code = 404
    error = "not_found"


class StoreError(PropDeskError):
    """The document store could not complete a call."""

    status_code = 503
    error = "store_unavailable"


class AuthErrorCode(str, Enum):
    USER_NOT_FOUND = "auth/user-not-found"
    WRONG_PASSWORD = "auth/wrong-password"
    INVALID_EMAIL = "auth/invalid-email"
    WEAK_PASSWORD = "auth/weak-password"
    EMAIL_ALREADY_IN_USE = "auth/email-already-in-use"
    NETWORK_REQUEST_FAILED = "auth/network-request-failed"
    UNKNOWN = "auth/unknown"


AUTH_ERROR_MESSAGES = {
    AuthErrorCode.USER_NOT_FOUND: "No account found with this email address",
    AuthErrorCode.WRONG_PASSWORD: "Incorrect password",
    AuthErrorCode.INVALID_EMAIL: "Invalid email address",
    AuthErrorCode.WEAK_PASSWORD: "Password is too weak",
    AuthErrorCode.EMAIL_ALREADY_IN_USE: "An account with this email already exists",
    AuthErrorCode.NETWORK_REQUEST_FAILED: "Network error. Please check your connection",
    AuthErrorCode.UNKNOWN: "An error occurred. Please try again",
}

AUTH_ERROR_STATUS = {
    AuthErrorCode.USER_NOT_FOUND: 401,
    AuthErrorCode.WRONG_PASSWORD: 401,
    AuthErrorCode.INVALID_EMAIL: 400,
    AuthErrorCode.WEAK_PASSWORD: 400,
    AuthErrorCode.EMAIL_ALREADY_IN_USE: 409,
    AuthErrorCode.NETWORK_REQUEST_FAILED: 503,
    AuthErrorCode.UNKNOWN: 500,
}


class AuthError(PropDeskError):
    error = "auth_error"

    def __init__(self, code=AuthErrorCode.UNKNOWN):
        try:
            self.code = AuthErrorCode(code)
        except ValueError:
            self.code = AuthErrorCode.UNKNOWN
        super().__init__(AUTH_ERROR_MESSAGES[self.code], AUTH_ERROR_STATUS[self.code])

    def to_dict(self) -> dict:
        return {"error": self.error, "code": self.code.value, "message": self.message}


class SignupError(PropDeskError):
    status_code = 500
    error = "signup_failed"

    def __init__(self, message: str, step: str | None = None, status_code: int | None = None):
        super().__init__(message, status_code)
        self.step = step

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message, "step": self.step}


class ProfileMissingError(PropDeskError):
    """Authenticated account without a profile record."""

    status_code = 409
    error = "profile_missing"
    redirect = "/"

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message, "redirect": self.redirect}


def register_error_handlers(app):
    @app.errorhandler(PropDeskError)
    def _propdesk_error(e):
        if e.status_code >= 500:
            app.logger.error("%s: %s", e.error, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify(error="bad_request", message=getattr(e, "description", "Bad Request")), 400

    @app.errorhandler(401)
    def unauthorized(e): return jsonify(error="unauthorized", message="Authentication required"), 401

    @app.errorhandler(403)
    def forbidden(e): return jsonify(error="forbidden", message="Insufficient permissions"), 403

    @app.errorhandler(404)
    def not_found(e): return jsonify(error="not_found", message="Resource not found"), 404

    @app.errorhandler(405)
    def method_not_allowed(e): return jsonify(error="method_not_allowed", message="Method not allowed"), 405

    @app.errorhandler(422)
    def unprocessable(e): return jsonify(error="unprocessable", message="Unprocessable request"), 422

    @app.errorhandler(500)
    def server_error(e):
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify(error="server_error", message="Internal Server Error"), 500
