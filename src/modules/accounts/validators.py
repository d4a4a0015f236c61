"""Password strength rules plugged into ``AUTH_PASSWORD_VALIDATORS``."""

from __future__ import annotations

import unicodedata

from django.core.exceptions import ValidationError


def _is_punct_or_symbol(char: str) -> bool:
    # Unicode general categories P* (punctuation) and S* (symbols)
    return unicodedata.category(char)[0] in ("P", "S")


class PasswordComplexityValidator:
    """Require upper-case, lower-case, digit and punctuation/symbol characters."""

    rules = (
        (str.isupper, "one uppercase letter"),
        (str.islower, "one lowercase letter"),
        (str.isdigit, "one digit"),
        (_is_punct_or_symbol, "one special character"),
    )

    def validate(self, password, user=None):
        missing = [
            label for check, label in self.rules if not any(check(c) for c in password)
        ]
        if missing:
            raise ValidationError(
                "Password must contain at least %(missing)s.",
                code="password_too_simple",
                params={"missing": ", ".join(missing)},
            )

    def get_help_text(self):
        return (
            "Your password must contain at least one uppercase letter, one "
            "lowercase letter, one digit and one special character."
        )
