"""Public availability endpoints mounted under ``hosts/``."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import HostAvailabilityView, HostMonthAvailabilityView, HostScheduleView

urlpatterns = [
    path("<slug:username>/availability/", HostAvailabilityView.as_view(), name="host-availability"),
    path(
        "<slug:username>/month-availability/",
        HostMonthAvailabilityView.as_view(),
        name="host-month-availability",
    ),
    path("<slug:username>/schedule/", HostScheduleView.as_view(), name="host-schedule"),
]
