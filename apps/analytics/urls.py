"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import HostDashboardView, HostInsightsView


urlpatterns = [
    # Do not prefix with 'analytics/' here; the prefix is defined in config.urls
    path("dashboard/", HostDashboardView.as_view(), name="analytics-dashboard"),
    path("insights/", HostInsightsView.as_view(), name="analytics-insights"),
]
