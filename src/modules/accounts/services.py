"""Account service layer: registration, login and token issuing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from django.db import IntegrityError, transaction
from rest_framework_simplejwt.tokens import RefreshToken

from modules.accounts.exceptions import InvalidCredentials, UserAlreadyExists
from modules.accounts.models import User, UserRole

if TYPE_CHECKING:
    from modules.accounts.dtos import LoginDTO, RegisterUserDTO
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AuthResult:
    user: User
    access: str
    refresh: str


def issue_tokens(user: User) -> RefreshToken:
    """Refresh token whose access token carries the profile claims."""
    refresh = RefreshToken.for_user(user)
    refresh["username"] = user.username
    refresh["email"] = user.email
    refresh["role"] = user.role
    return refresh


class AuthService:
    """Application service for account use-cases."""

    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def register(self, dto: RegisterUserDTO) -> User:
        """Create a regular (non-admin) user.

        Raises:
            UserAlreadyExists: if the username or email is taken.
        """
        log = logger.bind(username=dto.username)

        if self._repo.get_by_username(dto.username):
            log.warning("user.duplicate_username")
            raise UserAlreadyExists("Username already exists.")
        if self._repo.get_by_email(dto.email):
            log.warning("user.duplicate_email")
            raise UserAlreadyExists("Email already exists.")

        user = User(username=dto.username, email=dto.email, role=UserRole.USER)
        user.set_password(dto.password)
        try:
            user = self._repo.save(user)
        except IntegrityError as exc:
            # lost a race against a concurrent registration
            log.warning("user.duplicate_race")
            raise UserAlreadyExists("Username or email already exists.") from exc

        log.info("user.registered", user_id=str(user.id))
        return user

    def login(self, dto: LoginDTO) -> AuthResult:
        """Check credentials and issue a token pair.

        Raises:
            InvalidCredentials: unknown email, wrong password or inactive account.
        """
        user = self._repo.get_by_email(dto.email)
        if user is None:
            # hash anyway so response time does not reveal unknown emails
            User().set_password(dto.password)
            logger.warning("user.login_failed", reason="unknown_email")
            raise InvalidCredentials("Invalid credentials")
        if not user.check_password(dto.password) or not user.is_active:
            logger.warning("user.login_failed", user_id=str(user.id))
            raise InvalidCredentials("Invalid credentials")

        refresh = issue_tokens(user)
        logger.info("user.logged_in", user_id=str(user.id))
        return AuthResult(
            user=user,
            access=str(refresh.access_token),
            refresh=str(refresh),
        )
