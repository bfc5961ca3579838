"""
Validate case-form and status-update submissions against the active configuration.

Failures are collected for every field and returned keyed by the camelCase
field name the form uses, e.g. {"loanAmount": ["Loan amount must be a positive number."]}.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError

from schemas.loan_case import FIELD_MESSAGES, LoanCaseCreate, StatusUpdate
from services.errors import CaseValidationError
from utils.serialization import to_camel_key, to_snake_key

FORM_ERROR_KEY = "form"


def _plain_message(error: dict[str, Any]) -> str:
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    return str(error.get("msg", "Invalid value."))


def format_validation_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by top-level field, one readable message per failure."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        if not loc:
            key, message = FORM_ERROR_KEY, _plain_message(error)
        else:
            field = to_snake_key(str(loc[0]))
            key = to_camel_key(field)
            message = FIELD_MESSAGES.get(field) or _plain_message(error)
        bucket = errors.setdefault(key, [])
        if message not in bucket:
            bucket.append(message)
    return errors


def _context(options: Optional[Mapping[str, list[str]]]) -> dict[str, Any]:
    return {"options": dict(options)} if options is not None else {}


def validate_case_draft(data: Mapping[str, Any], options: Optional[Mapping[str, list[str]]] = None) -> LoanCaseCreate:
    """Return the validated draft or raise CaseValidationError with field-keyed messages."""
    try:
        return LoanCaseCreate.model_validate(dict(data), context=_context(options))
    except ValidationError as e:
        raise CaseValidationError(format_validation_errors(e)) from e


def validate_status_update(data: Mapping[str, Any], options: Optional[Mapping[str, list[str]]] = None) -> StatusUpdate:
    try:
        return StatusUpdate.model_validate(dict(data), context=_context(options))
    except ValidationError as e:
        raise CaseValidationError(format_validation_errors(e)) from e
