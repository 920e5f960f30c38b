import uuid
from flask import Blueprint, request, jsonify, current_app
from pydantic import ValidationError
from ..extensions import reservation_service
from ..http import jerror, validation_error
from ..notifications import NotificationKind, notify
from ..ratelimit import booking_limiter, client_ip
from ..schemas import CreateReservationRequest, Reservation, Status, booking_context
from ..utils.time import utc_now

bp = Blueprint("reservations", __name__)


def _allow(ip: str) -> bool:
    return booking_limiter.allow(
        ip,
        current_app.config["RATE_MAX_BOOKINGS"],
        current_app.config["RATE_WINDOW_SECONDS"],
    )


@bp.post("")
def create_reservation():
    ip = client_ip()
    if not _allow(ip):
        return jerror(
            429,
            "RATE_LIMITED",
            "Trop de demandes de réservation. Veuillez réessayer plus tard ou nous contacter par téléphone.",
        )

    payload = request.get_json(silent=True)
    if not payload:
        return jerror(400, "INVALID_PAYLOAD", "Missing or invalid JSON payload.")

    service = reservation_service()
    context = booking_context(
        service.get_config(), max_advance_months=current_app.config["MAX_ADVANCE_MONTHS"]
    )
    try:
        data = CreateReservationRequest.model_validate(payload, context=context)
    except ValidationError as e:
        return validation_error(e)

    reservation = Reservation(
        id=str(uuid.uuid4()),
        name=data.name,
        email=data.email,
        phone=data.phone,
        date=data.date,
        time=data.time,
        guests=data.guests,
        message=data.message,
        status=Status.PENDING,
        created_at=utc_now(),
        ip=ip,
    )
    # Raises CapacityConflict (409) when the slot filled up.
    reservation = service.create_reservation(reservation)

    notify(reservation, NotificationKind.CUSTOMER_CONFIRMATION)
    notify(reservation, NotificationKind.RESTAURANT_NOTIFICATION)

    return jsonify(
        message="Votre demande de réservation a été envoyée avec succès !",
        id=reservation.id,
        date=reservation.date.isoformat(),
        time=reservation.time,
        guests=reservation.guests,
    ), 201


@bp.get("/<reservation_id>")
def get_reservation(reservation_id: str):
    reservation = reservation_service().get_reservation(reservation_id)
    return jsonify(reservation.public_view())
