"""User DRF serializers (output only; input goes through DTOs)."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import User


class UserSerializer(serializers.ModelSerializer):
    """Public profile; the password hash is never exposed."""

    class Meta:
        model = User
        fields = ["id", "username", "email", "role"]
        read_only_fields = fields
