"""User domain models for the slot booking platform.

The platform differentiates three roles: customers who book slots,
hosts who publish availability and get paid, and platform admins.
Hosts expose a public profile under their ``username`` slug and their
wall-clock availability windows are interpreted in ``time_zone``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


DEFAULT_HOST_TIMEZONE = "Asia/Kolkata"


class CustomUserManager(BaseUserManager):
    """User manager that uses the email address as the login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email)

        username = extra_fields.get("username")
        if not username:
            extra_fields["username"] = None

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.CUSTOMER)
        return self._create_user(email, password, **extra_fields)

    def create_host(self, email: str, username: str, password: str | None = None, **extra_fields: Any):
        extra_fields["role"] = CustomUser.RoleChoices.HOST
        return self.create_user(email, password, username=username, **extra_fields)

    def lock_for_update(self, pk: Any):
        """Fetch a user row, taking a row lock when inside transaction.atomic()."""
        queryset = self.get_queryset()
        if transaction.get_connection().in_atomic_block:
            try:
                queryset = queryset.select_for_update()
            except NotSupportedError:
                pass
        return queryset.get(pk=pk)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Platform user with a role and, for hosts, public profile attributes."""

    class RoleChoices(models.TextChoices):
        CUSTOMER = "customer", _("Customer")
        HOST = "host", _("Host")
        ADMIN = "admin", _("Admin")

    username = models.SlugField(
        _("Profile slug"),
        max_length=150,
        unique=True,
        null=True,
        blank=True,
        help_text=_("Public profile URL segment, required for hosts."),
    )
    name = models.CharField(_("Name"), max_length=150)
    email = models.EmailField(_("Email"), unique=True)
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.CUSTOMER,
    )
    bio = models.TextField(blank=True)
    hourly_rate = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    hourly_rate_usd = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="INR")
    time_zone = models.CharField(
        max_length=64,
        default=DEFAULT_HOST_TIMEZONE,
        help_text=_("IANA timezone in which availability windows are interpreted."),
    )
    profile_image = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    def is_host(self) -> bool:
        return self.role == self.RoleChoices.HOST

    def is_platform_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_superuser

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone or DEFAULT_HOST_TIMEZONE)


User = CustomUser
