"""Account domain exceptions.

Raised by ``AuthService``; views translate them into HTTP responses.
"""

from __future__ import annotations


class UserAlreadyExists(Exception):
    """The username or email is already registered."""


class InvalidCredentials(Exception):
    """Unknown email or wrong password.

    Both cases share this exception so callers cannot tell which one
    happened.
    """
