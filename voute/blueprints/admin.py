from flask import Blueprint, request, jsonify
from pydantic import ValidationError
from ..auth import check_admin
from ..extensions import reservation_service
from ..http import jerror, validation_error
from ..notifications import NotificationKind, notify
from ..schemas import CancelRequest, ListReservationsQuery, SettingsUpdate
from ..utils.time import parse_day

bp = Blueprint("admin", __name__)


@bp.before_request
def require_admin():
    if not check_admin():
        return jerror(401, "UNAUTHORIZED", "Missing or invalid bearer token.")


@bp.get("/reservations")
def list_reservations():
    """
    Admin list with optional filters and pagination.
    Query: ?date=YYYY-MM-DD&status=pending&page=1&limit=50
    """
    try:
        query = ListReservationsQuery.model_validate(request.args.to_dict())
    except ValidationError as e:
        return validation_error(e)

    page = reservation_service().list_reservations(
        day=query.date, status=query.status, page=query.page, limit=query.limit
    )
    return jsonify(page.to_json())


@bp.get("/reservations/<reservation_id>")
def get_reservation(reservation_id: str):
    return jsonify(reservation_service().get_reservation(reservation_id).to_json())


@bp.put("/reservations/<reservation_id>/confirm")
def confirm_reservation(reservation_id: str):
    reservation = reservation_service().confirm(reservation_id)
    notify(reservation, NotificationKind.CONFIRMED)
    return jsonify(message="Réservation confirmée", reservation=reservation.to_json())


@bp.put("/reservations/<reservation_id>/cancel")
def cancel_reservation(reservation_id: str):
    try:
        data = CancelRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return validation_error(e)

    reservation = reservation_service().cancel(reservation_id, data.reason)
    notify(reservation, NotificationKind.CANCELLED)
    return jsonify(message="Réservation annulée", reservation=reservation.to_json())


@bp.delete("/reservations/<reservation_id>")
def delete_reservation(reservation_id: str):
    reservation_service().delete(reservation_id)
    return jsonify(message="Réservation supprimée")


@bp.get("/stats")
def stats():
    return jsonify(reservation_service().get_stats().to_json())


@bp.get("/dashboard/<day>")
def dashboard(day: str):
    try:
        parsed = parse_day(day)
    except ValueError as e:
        return jerror(422, "BAD_DATE", "Invalid date format. Use YYYY-MM-DD.", str(e))
    return jsonify(reservation_service().get_dashboard_data(parsed).to_json())


@bp.get("/settings")
def get_settings():
    return jsonify(reservation_service().get_config().to_json())


@bp.put("/settings")
def update_settings():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jerror(400, "INVALID_PAYLOAD", "Missing or invalid JSON payload.")
    try:
        SettingsUpdate.model_validate(payload)
        config = reservation_service().update_config(payload)
    except ValidationError as e:
        return validation_error(e)
    return jsonify(message="Paramètres mis à jour", settings=config.to_json())


@bp.get("/verify")
def verify():
    return jsonify(message="Clé API valide")
