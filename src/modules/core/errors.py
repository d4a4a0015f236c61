"""Helpers for turning validation failures into ``{"detail": ...}`` bodies."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

_VALUE_ERROR_PREFIX = "Value error, "


def pydantic_detail(exc: PydanticValidationError) -> str:
    """Return a human readable message for the first failing field.

    Pydantic prefixes messages raised from ``field_validator`` with
    ``"Value error, "``; that prefix is dropped.  Built-in type errors are
    reported as ``"<field>: <message>"``.
    """
    errors = exc.errors(include_url=False)
    if not errors:
        return "Invalid input."
    first = errors[0]
    message = first.get("msg", "Invalid input.")
    if message.startswith(_VALUE_ERROR_PREFIX):
        return message[len(_VALUE_ERROR_PREFIX):]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {message}" if loc else message
