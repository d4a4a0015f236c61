"""Account DTOs for the Service Layer.

Immutable Pydantic v2 models validated before any database access:

- ``RegisterUserDTO``: username/email format and password strength.
- ``LoginDTO``: email format only; credentials are checked by the service.
"""

from __future__ import annotations

import re

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from pydantic import BaseModel, ConfigDict, field_validator

from modules.accounts.models import USERNAME_PATTERN

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")
USERNAME_RE = re.compile(USERNAME_PATTERN)
USERNAME_MAX_LENGTH = 150
EMAIL_MAX_LENGTH = 254


def _check_email(value: str) -> str:
    value = value.strip()
    if len(value) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format.")
    return value.lower()


class RegisterUserDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    email: str
    password: str

    @field_validator("username")
    @classmethod
    def username_must_be_alphanumeric(cls, v: str) -> str:
        v = v.strip()
        if not USERNAME_RE.match(v):
            raise ValueError("Username must contain only letters and numbers.")
        if len(v) > USERNAME_MAX_LENGTH:
            raise ValueError(f"Username must be at most {USERNAME_MAX_LENGTH} characters.")
        return v

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        try:
            validate_password(v)
        except DjangoValidationError as exc:
            raise ValueError(" ".join(exc.messages)) from exc
        return v


class LoginDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v: str) -> str:
        return _check_email(v)
