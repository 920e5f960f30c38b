from flask import Blueprint, request, jsonify
from pydantic import ValidationError
from ..extensions import reservation_service
from ..http import validation_error
from ..schemas import AvailabilityQuery, SlotQuery
from ..utils.time import js_weekday

bp = Blueprint("availability", __name__)


@bp.get("/config")
def public_config():
    return jsonify(reservation_service().public_config())


@bp.get("")
def day_availability():
    """
    Per-slot occupancy for one day.
    Query: ?date=YYYY-MM-DD
    """
    try:
        query = AvailabilityQuery.model_validate(request.args.to_dict())
    except ValidationError as e:
        return validation_error(e)

    service = reservation_service()
    config = service.get_config()
    weekday = js_weekday(query.date)

    if weekday in config.effective_closed_days:
        return jsonify(
            date=query.date.isoformat(),
            closed=True,
            message="Restaurant fermé ce jour",
            slots=[],
        )

    slots = service.get_available_slots(query.date)
    if weekday == 0 and config.dinner_closed_on_sunday:
        slots = [s for s in slots if s.time not in config.time_slots.dinner]

    return jsonify(
        date=query.date.isoformat(),
        closed=False,
        slots=[s.to_json() for s in slots],
    )


@bp.get("/slot")
def slot_availability():
    """
    Detailed check for one slot and party size.
    Query: ?date=YYYY-MM-DD&time=HH:MM&guests=N
    """
    service = reservation_service()
    try:
        query = SlotQuery.model_validate(
            request.args.to_dict(), context={"config": service.get_config()}
        )
    except ValidationError as e:
        return validation_error(e)

    result = service.check_availability(query.date, query.time, query.guests)
    return jsonify(result.to_json())
