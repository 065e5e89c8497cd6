"""Errors raised by the reservation flow.

Each error carries the HTTP status and default message the API renders
for it, see ``config.exceptions.api_exception_handler``.
"""

from __future__ import annotations


class ReservationError(Exception):
    status_code = 400
    default_detail = "Reservation request failed."
    default_code = "reservation_error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class SlotUnavailableError(ReservationError):
    """The slot is confirmed or held by a live lock. Safe to retry later."""

    status_code = 409
    default_detail = "This slot is no longer available. Please pick another time."
    default_code = "slot_unavailable"


class PriceResolutionError(ReservationError):
    """No availability rule governs the requested start instant."""

    status_code = 400
    default_detail = "This slot is no longer offered. Please retry from the listing."
    default_code = "price_unresolved"


class ProviderError(ReservationError):
    """The payment provider could not be reached or rejected the request."""

    status_code = 502
    default_detail = "Payment provider is unavailable. Please try again."
    default_code = "provider_error"


class SignatureMismatchError(ReservationError):
    status_code = 400
    default_detail = "Payment verification failed."
    default_code = "signature_mismatch"


class ReservationNotFoundError(ReservationError):
    status_code = 404
    default_detail = "Reservation not found."
    default_code = "reservation_not_found"


class ReservationNotPayableError(ReservationError):
    """The reservation was cancelled or completed; a payment can no longer confirm it."""

    status_code = 409
    default_detail = "This reservation is no longer payable."
    default_code = "reservation_not_payable"
