"""Authentication API views.

Register and login are public and sit behind the strict ``auth`` rate
limit tier on top of the global one.
"""

from __future__ import annotations

from collections.abc import Mapping

from drf_spectacular.utils import extend_schema
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.dtos import LoginDTO, RegisterUserDTO
from modules.accounts.exceptions import InvalidCredentials, UserAlreadyExists
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import UserSerializer
from modules.accounts.services import AuthService
from modules.core.errors import pydantic_detail
from modules.core.throttling import AuthRateThrottle, GlobalRateThrottle

INVALID_BODY = {"detail": "Invalid request body"}


class _PublicAuthView(APIView):
    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_classes = [GlobalRateThrottle, AuthRateThrottle]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AuthService(repository=UserDjangoRepository())


class RegisterView(_PublicAuthView):
    @extend_schema(request=None, responses={201: UserSerializer})
    def post(self, request: Request) -> Response:
        """POST /api/v1/auth/register/"""
        data = request.data
        if not isinstance(data, Mapping):
            return Response(INVALID_BODY, status=status.HTTP_400_BAD_REQUEST)

        try:
            dto = RegisterUserDTO(
                username=data.get("username"),
                email=data.get("email"),
                password=data.get("password"),
            )
        except PydanticValidationError as exc:
            return Response(
                {"detail": pydantic_detail(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            user = self._service.register(dto)
        except UserAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(
            {
                "message": "User registered successfully",
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(_PublicAuthView):
    @extend_schema(request=None, responses={200: UserSerializer})
    def post(self, request: Request) -> Response:
        """POST /api/v1/auth/login/"""
        data = request.data
        if not isinstance(data, Mapping):
            return Response(INVALID_BODY, status=status.HTTP_400_BAD_REQUEST)

        try:
            dto = LoginDTO(email=data.get("email"), password=data.get("password"))
        except PydanticValidationError as exc:
            return Response(
                {"detail": pydantic_detail(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            result = self._service.login(dto)
        except InvalidCredentials as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        return Response(
            {
                "message": "Login successful",
                "token": result.access,
                "refresh": result.refresh,
                "user": UserSerializer(result.user).data,
            }
        )


class MeView(APIView):
    """Profile of the authenticated caller."""

    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer})
    def get(self, request: Request) -> Response:
        return Response(UserSerializer(request.user).data)
