from app.utils.base.enums import BaseEnum, Provenance, WinnerOption, WinnerStatus
from app.utils.base.errors import (
    AppError,
    Conflict,
    InvalidFormat,
    MissingField,
    NotFound,
    SignatureMismatch,
    UpstreamFailure,
)

__all__ = [
    "AppError",
    "BaseEnum",
    "Conflict",
    "InvalidFormat",
    "MissingField",
    "NotFound",
    "Provenance",
    "SignatureMismatch",
    "UpstreamFailure",
    "WinnerOption",
    "WinnerStatus",
]
