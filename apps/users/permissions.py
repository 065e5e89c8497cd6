"""Permission classes shared by host-facing endpoints."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsHost(permissions.BasePermission):
    """Only authenticated hosts (or platform staff) may manage availability."""

    message = "Only hosts can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if user.is_staff or user.is_platform_admin():
            return True
        return user.is_host()
