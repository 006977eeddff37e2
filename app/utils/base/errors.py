from fastapi import HTTPException


class AppError(HTTPException):
    """Base error rendered as ``{"success": false, "error": ..., "details": ...}``."""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, error: str | None = None, details: str | None = None, **extra) -> None:
        self.error = error or self.default_message
        self.details = details
        self.extra = extra
        super().__init__(status_code=type(self).status_code, detail=self.error)

    def to_body(self) -> dict:
        body = {"success": False, "error": self.error}
        if self.details:
            body["details"] = self.details
        body.update(self.extra)
        return body


class MissingField(AppError):
    status_code = 400
    default_message = "Missing required fields"


class InvalidFormat(AppError):
    status_code = 400
    default_message = "Invalid request format"


class SignatureMismatch(AppError):
    status_code = 400
    default_message = "Invalid payment signature"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class UpstreamFailure(AppError):
    status_code = 500
    default_message = "Upstream service failure"
