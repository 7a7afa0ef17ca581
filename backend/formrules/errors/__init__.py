"""Error codes, AppError values and the Ok/Err Result container.

Usage:
    from formrules.errors import Ok, Err

    match parse_ingress(validator, payload):
        case Ok(accessor):
            name = accessor.get_field("user.name")
        case Err(error):
            log.info("rejected", code=error.code.name, origin=error.origin)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
]
