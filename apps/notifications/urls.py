"""URL routing for notifications."""

from django.urls import path  # type: ignore

from .views import CustomEmailView

urlpatterns = [
    path("custom-email/", CustomEmailView.as_view(), name="notification-custom-email"),
]
