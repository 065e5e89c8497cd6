"""API views for the reservation flow.

checkout -> create-order (Razorpay) or create-payu-order (PayU) ->
verify-payment / payu-response. Every step feeds the host's funnel.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.analytics.services import record_event, session_id_for
from apps.payments.gateways import build_payment_gateways

from .models import Reservation
from .serializers import (
    RazorpayVerificationSerializer,
    ReservationRequestSerializer,
    ReservationSerializer,
    SlotRequestSerializer,
)
from .services import (
    Customer,
    checkout_quote,
    confirm_payu,
    confirm_razorpay,
    create_reservation,
    requested_range,
)


class ReservationViewSet(viewsets.ReadOnlyModelViewSet):
    """Reservations hosted by, or made by, the current user. Staff see all."""

    serializer_class = ReservationSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "payment_gateway"]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = Reservation.objects.select_related("host")
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        if hasattr(user, "is_host") and user.is_host():
            return qs.filter(host=user)
        return qs.filter(customer=user)


class CheckoutView(APIView):
    """Price of the picked slot in both currencies, resolved from the host's rules."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):  # type: ignore
        serializer = SlotRequestSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        host = data["host"]

        inr = checkout_quote(host, data["start_time"], data["end_time"], "INR")
        usd = checkout_quote(host, data["start_time"], data["end_time"], "USD")

        record_event(
            host=host,
            event="checkout_view",
            session_id=session_id_for(request),
            metadata={"start_time": data["start_time"].isoformat(), "is_free": inr.is_free},
        )

        return Response(
            {
                "host_id": host.pk,
                "host_name": host.name,
                "start_time": data["start_time"],
                "end_time": data["end_time"],
                "duration_minutes": requested_range(data["start_time"], data["end_time"]).minutes,
                "is_free": inr.is_free,
                "amount": inr.amount,
                "amount_usd": usd.amount,
            }
        )


class CreateOrderView(APIView):
    """Lock the slot and open a payment with ``gateway``; free slots are confirmed at once."""

    permission_classes = [permissions.AllowAny]
    gateway = Reservation.Gateway.RAZORPAY

    def post(self, request):  # type: ignore
        serializer = ReservationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        host = data["host"]

        customer = Customer.from_user(request.user)
        if customer.user is None and (data.get("customer_name") or data.get("customer_email")):
            customer = Customer(
                name=data.get("customer_name") or customer.name,
                email=data.get("customer_email") or customer.email,
            )

        outcome = create_reservation(
            host,
            data["start_time"],
            data["end_time"],
            currency=data["currency"],
            customer=customer,
            gateway=self.gateway,
            gateways=build_payment_gateways(),
        )

        session_id = session_id_for(request)
        record_event(
            host=host,
            event="payment_start",
            session_id=session_id,
            metadata={
                "start_time": data["start_time"].isoformat(),
                "amount": outcome.quote.amount,
                "currency": outcome.quote.currency,
                "gateway": self.gateway,
            },
        )
        if outcome.quote.is_free:
            record_event(
                host=host,
                event="payment_success",
                session_id=session_id,
                metadata={"reservation_id": outcome.reservation.pk, "amount": 0, "is_free": True},
            )

        return Response(outcome.as_dict(), status=status.HTTP_201_CREATED)


class CreatePayUOrderView(CreateOrderView):
    gateway = Reservation.Gateway.PAYU


class VerifyPaymentView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = RazorpayVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        reservation = confirm_razorpay(
            data["razorpay_order_id"],
            data["razorpay_payment_id"],
            data["razorpay_signature"],
            reservation_id=data.get("reservation_id"),
            gateways=build_payment_gateways(),
        )
        record_event(
            host=reservation.host,
            event="payment_success",
            session_id=session_id_for(request),
            metadata={"reservation_id": reservation.pk, "amount": reservation.amount, "gateway": "razorpay"},
        )
        return Response({"success": True, "reservation": ReservationSerializer(reservation).data})


class PayUResponseView(APIView):
    """PayU posts the payment result here as a form."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []
    parser_classes = [FormParser, MultiPartParser, JSONParser]

    def post(self, request):  # type: ignore
        params = {key: request.data.get(key) for key in request.data.keys()}
        reservation = confirm_payu(params, gateways=build_payment_gateways())

        if reservation.status != Reservation.Status.CONFIRMED:
            return Response(
                {"success": False, "status": params.get("status"), "reservation_id": reservation.pk},
                status=status.HTTP_400_BAD_REQUEST,
            )

        record_event(
            host=reservation.host,
            event="payment_success",
            session_id=session_id_for(request),
            metadata={"reservation_id": reservation.pk, "amount": reservation.amount, "gateway": "payu"},
        )
        return Response({"success": True, "reservation": ReservationSerializer(reservation).data})
