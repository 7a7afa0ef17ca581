"""Validation at System Boundaries

Result-returning wrapper for callers that prefer values to exceptions:
a failed validation becomes Err(AppError) tagged with its origin.
"""
from __future__ import annotations

from typing import Any

from formrules.errors import AppError, Err, Ok, Result

from .accessor import DataAccessor
from .errors import ValidationError
from .validator import Validator


def parse_ingress(validator: Validator, data: Any) -> Result[DataAccessor, AppError]:
    """Validate data entering the system. Use for: request bodies, form submissions, file uploads."""
    try:
        accessor = validator.validate(data)
    except ValidationError as e:
        return Err(e.to_app_error().with_origin("ingress"))
    return Ok(accessor)
