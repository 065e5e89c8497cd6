"""E-mail notifications.

Sending never raises: failures are logged and reported as ``False`` so a
mail outage cannot break a reservation or a payment confirmation.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.defaultfilters import linebreaksbr  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils.html import escape, strip_tags  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Reservation

logger = logging.getLogger(__name__)


def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
    *,
    html_message: str | None = None,
    from_email: str | None = None,
) -> bool:
    """
    Send one e-mail.

    Args:
        recipient_email: Recipient address
        subject: Subject line
        template_name: Django template rendered with ``context`` (optional)
        context: Template context; ``context["message"]`` is the plain body fallback
        html_message: Pre-rendered HTML body (optional)
        from_email: Sender, defaults to DEFAULT_FROM_EMAIL

    Returns:
        bool: True if the message was handed to the mail backend
    """
    try:
        if html_message:
            text_message = strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=from_email or settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info("Email sent to %s: %s", recipient_email, subject)
        return True

    except Exception as exc:
        logger.error("Failed to send email to %s: %s", recipient_email, exc, exc_info=True)
        return False


def _local_window(reservation: "Reservation") -> str:
    tz = reservation.host.tzinfo
    start = reservation.start_time.astimezone(tz)
    end = reservation.end_time.astimezone(tz)
    return f"{start:%d %b %Y, %H:%M} - {end:%H:%M} ({reservation.host.time_zone})"


def send_customer_confirmation_email(reservation: "Reservation") -> bool:
    host = reservation.host
    window = _local_window(reservation)
    meeting = (
        f'<p><strong>Meeting link:</strong> <a href="{escape(reservation.meeting_link)}">'
        f"{escape(reservation.meeting_link)}</a></p>"
        if reservation.meeting_link
        else ""
    )

    html_message = f"""
    <html>
    <body>
        <h2>Booking confirmed!</h2>
        <p>Hi <strong>{escape(reservation.customer_name)}</strong>,</p>
        <p>Your booking with <strong>{escape(host.name)}</strong> has been confirmed.</p>
        <ul>
            <li><strong>Time:</strong> {window}</li>
            <li><strong>Amount paid:</strong> {reservation.currency} {reservation.amount}</li>
        </ul>
        {meeting}
        <p>Thank you for booking with us!</p>
    </body>
    </html>
    """

    return send_email_notification(
        recipient_email=reservation.customer_email,
        subject="Booking confirmed",
        template_name=None,
        context={"reservation": reservation},
        html_message=html_message,
    )


def send_host_new_booking_email(reservation: "Reservation") -> bool:
    host = reservation.host

    html_message = f"""
    <html>
    <body>
        <h2>New booking</h2>
        <p>Hi {escape(host.name)},</p>
        <p>You have a new booking from <strong>{escape(reservation.customer_name)}</strong>.</p>
        <ul>
            <li><strong>Time:</strong> {_local_window(reservation)}</li>
            <li><strong>Amount:</strong> {reservation.currency} {reservation.amount}</li>
        </ul>
        <p>Check your dashboard for more details.</p>
    </body>
    </html>
    """

    return send_email_notification(
        recipient_email=host.email,
        subject="New booking received",
        template_name=None,
        context={"reservation": reservation},
        html_message=html_message,
    )


def notify_reservation_confirmed(reservation: "Reservation") -> bool:
    """Customer and host confirmation e-mails. True only if both went out."""
    customer_sent = send_customer_confirmation_email(reservation)
    host_sent = send_host_new_booking_email(reservation)
    logger.info(
        "Confirmation notices for reservation %s: customer=%s host=%s",
        reservation.pk,
        customer_sent,
        host_sent,
    )
    return customer_sent and host_sent


def send_custom_email(to: str, subject: str, body: str, from_name: str) -> bool:
    """Free-form message from a host to one of their customers."""
    html_message = f"""
    <html>
    <body>
        <p>{linebreaksbr(body)}</p>
        <hr>
        <p style="color: #888; font-size: 12px;">This message was sent by {escape(from_name)} via the booking platform.</p>
    </body>
    </html>
    """

    return send_email_notification(
        recipient_email=to,
        subject=subject,
        template_name=None,
        context={"message": body},
        html_message=html_message,
        from_email=f'"{from_name}" <{settings.DEFAULT_FROM_EMAIL}>',
    )
