"""URL routing for the reservation flow."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    CheckoutView,
    CreateOrderView,
    CreatePayUOrderView,
    PayUResponseView,
    ReservationViewSet,
    VerifyPaymentView,
)

router = DefaultRouter()
router.register(r"", ReservationViewSet, basename="reservation")

urlpatterns = [
    path("checkout/", CheckoutView.as_view(), name="reservation-checkout"),
    path("create-order/", CreateOrderView.as_view(), name="reservation-create-order"),
    path("create-payu-order/", CreatePayUOrderView.as_view(), name="reservation-create-payu-order"),
    path("verify-payment/", VerifyPaymentView.as_view(), name="reservation-verify-payment"),
    path("payu-response/", PayUResponseView.as_view(), name="reservation-payu-response"),
    path("", include(router.urls)),
]
