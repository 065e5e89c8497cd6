"""Integration tests for authentication and profile endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.analytics.models import AnalyticsEvent
from apps.users.models import User


class RegistrationTests(APITestCase):
    def setUp(self) -> None:
        self.url = reverse("auth:register")

    def _payload(self, **overrides) -> dict[str, str]:
        payload = {
            "email": "maya@example.com",
            "name": "Maya Rao",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }
        payload.update(overrides)
        return payload

    def test_customer_registration_returns_tokens(self) -> None:
        response = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("access", response.data["tokens"])
        self.assertIn("refresh", response.data["tokens"])
        user = User.objects.get(email="maya@example.com")
        self.assertEqual(user.role, User.RoleChoices.CUSTOMER)
        self.assertIsNone(user.username)

    def test_host_registration_requires_username(self) -> None:
        response = self.client.post(self.url, self._payload(role="host"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("username", response.data)

    def test_host_registration_with_timezone(self) -> None:
        response = self.client.post(
            self.url,
            self._payload(role="host", username="maya", time_zone="Europe/Berlin"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        host = User.objects.get(username="maya")
        self.assertTrue(host.is_host())
        self.assertEqual(host.time_zone, "Europe/Berlin")

    def test_unknown_timezone_is_rejected(self) -> None:
        response = self.client.post(self.url, self._payload(time_zone="Mars/Olympus"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("time_zone", response.data)

    def test_password_mismatch(self) -> None:
        response = self.client.post(self.url, self._payload(password_confirm="Different123"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.data)

    def test_duplicate_email(self) -> None:
        User.objects.create_user(email="maya@example.com", password="StrongPass123", name="Maya")

        response = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)


class LoginTests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="ravi@example.com", password="StrongPass123", name="Ravi")
        self.url = reverse("auth:login")

    def test_login_with_valid_credentials(self) -> None:
        response = self.client.post(
            self.url, {"email": "ravi@example.com", "password": "StrongPass123"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["user"]["email"], "ravi@example.com")
        self.assertIn("access", response.data["tokens"])

    def test_login_with_wrong_password(self) -> None:
        response = self.client.post(self.url, {"email": "ravi@example.com", "password": "nope"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh_token(self) -> None:
        login = self.client.post(
            self.url, {"email": "ravi@example.com", "password": "StrongPass123"}, format="json"
        )

        response = self.client.post(
            reverse("auth:token_refresh"), {"refresh": login.data["tokens"]["refresh"]}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)

    def test_me_requires_authentication(self) -> None:
        response = self.client.get(reverse("user-me"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_updates_profile(self) -> None:
        self.client.force_authenticate(self.user)

        response = self.client.patch(reverse("user-me"), {"bio": "Career coach"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, "Career coach")


class HostProfileTests(APITestCase):
    def setUp(self) -> None:
        self.host = User.objects.create_host(
            email="host@example.com", username="anita", password="StrongPass123", name="Anita"
        )

    def test_public_profile_records_profile_view(self) -> None:
        response = self.client.get(
            reverse("host-profile", args=["anita"]),
            HTTP_REFERER="https://twitter.com/anita",
            HTTP_X_SESSION_ID="visitor-1",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["username"], "anita")
        self.assertNotIn("email", response.data)

        event = AnalyticsEvent.objects.get(host=self.host)
        self.assertEqual(event.event, AnalyticsEvent.EventKind.PROFILE_VIEW)
        self.assertEqual(event.session_id, "visitor-1")
        self.assertEqual(event.metadata["referrer"], "https://twitter.com/anita")

    def test_customers_have_no_public_profile(self) -> None:
        User.objects.create_user(email="c@example.com", username="casual", password="StrongPass123", name="C")

        response = self.client.get(reverse("host-profile", args=["casual"]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(AnalyticsEvent.objects.exists())
