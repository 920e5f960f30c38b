"""
Reservation emails sent through Flask-Mail.

Sending is best effort: a failure is logged and reported as False, and
never undoes the state change that triggered it.
"""

from enum import Enum

from flask import current_app, render_template
from flask_mail import Message

from .extensions import mail
from .schemas import Reservation
from .utils.time import long_date


class NotificationKind(str, Enum):
    CUSTOMER_CONFIRMATION = "customer_confirmation"
    RESTAURANT_NOTIFICATION = "restaurant_notification"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


def _subject(reservation: Reservation, kind: NotificationKind) -> str:
    if kind is NotificationKind.RESTAURANT_NOTIFICATION:
        return f"Nouvelle réservation - {reservation.name} - {long_date(reservation.date)} à {reservation.time}"
    return {
        NotificationKind.CUSTOMER_CONFIRMATION: "Demande de réservation - La Voûte Savoie",
        NotificationKind.CONFIRMED: "Réservation confirmée - La Voûte Savoie",
        NotificationKind.CANCELLED: "Réservation annulée - La Voûte Savoie",
    }[kind]


def _recipient(reservation: Reservation, kind: NotificationKind) -> str | None:
    if kind is NotificationKind.RESTAURANT_NOTIFICATION:
        return current_app.config.get("RESTAURANT_EMAIL") or current_app.config.get("MAIL_USERNAME")
    return reservation.email


def build_message(reservation: Reservation, kind: NotificationKind) -> Message:
    return Message(
        subject=_subject(reservation, kind),
        recipients=[_recipient(reservation, kind)],
        html=render_template(f"email/{kind.value}.html", reservation=reservation),
    )


def notify(reservation: Reservation, kind: NotificationKind) -> bool:
    """Sends the email for ``kind``. Returns whether it went out."""
    if not _recipient(reservation, kind):
        current_app.logger.warning("No recipient configured for %s email", kind.value)
        return False
    try:
        mail.send(build_message(reservation, kind))
    except Exception:
        current_app.logger.exception(
            "Failed to send %s email for reservation %s", kind.value, reservation.id
        )
        return False
    current_app.logger.info("Sent %s email for reservation %s", kind.value, reservation.id)
    return True
