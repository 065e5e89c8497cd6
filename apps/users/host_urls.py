"""Public host profile routes, mounted under ``hosts/``."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import HostProfileView

urlpatterns = [
    path("<slug:username>/", HostProfileView.as_view(), name="host-profile"),
]
