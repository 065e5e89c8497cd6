"""URL routing for host availability rule management."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AvailabilityRuleViewSet

router = DefaultRouter()
router.register(r"rules", AvailabilityRuleViewSet, basename="availability-rule")

urlpatterns = [
    path("", include(router.urls)),
]
