import datetime as dt
import logging
import math
import threading
from typing import Any

from pydantic.alias_generators import to_camel

from ..errors import CapacityConflict, ReservationNotFound
from ..schemas import (
    AvailabilityResult,
    DashboardData,
    Reservation,
    ReservationPage,
    ReservationStats,
    RestaurantConfig,
    SlotAvailability,
    Status,
    default_config,
)
from ..store import ReservationStore
from ..utils.time import local_today, utc_now
from . import availability

logger = logging.getLogger(__name__)


class ReservationService:
    """Reservation and configuration operations over an injected store.

    Each call reloads the documents it needs, so results always reflect
    the latest write. Check-then-write sequences run under a lock, which
    serializes bookings within one process only.
    """

    def __init__(self, store: ReservationStore):
        self.store = store
        self._lock = threading.RLock()

    # --- Configuration ---

    def get_config(self) -> RestaurantConfig:
        config = self.store.get_config()
        if config is None:
            config = default_config()
            self.store.set_config(config)
            logger.info("Initialized default restaurant configuration")
        return config

    def update_config(self, updates: dict[str, Any]) -> RestaurantConfig:
        """Shallow-merges ``updates`` over the current configuration.

        Keys may be given as camelCase aliases or snake_case field names.
        """
        updates = {to_camel(k) if k in RestaurantConfig.model_fields else k: v for k, v in updates.items()}
        with self._lock:
            current = self.get_config().to_json()
            merged = RestaurantConfig.model_validate({**current, **updates})
            self.store.set_config(merged)
        logger.info("Restaurant configuration updated: %s", ", ".join(sorted(updates)))
        return merged

    def public_config(self) -> dict:
        config = self.get_config()
        return {
            "closedDays": config.effective_closed_days,
            "sundayDinnerClosed": config.dinner_closed_on_sunday,
            "timeSlots": config.time_slots.to_json(),
            "hours": config.hours,
        }

    # --- Availability ---

    def check_availability(self, day: dt.date, time: str, guests: int) -> AvailabilityResult:
        return availability.check_availability(
            self.store.all_reservations(), self.get_config(), day, time, guests
        )

    def get_suggested_times(self, day: dt.date, guests: int) -> list[str]:
        return availability.get_suggested_times(
            self.store.all_reservations(), self.get_config(), day, guests
        )

    def get_available_slots(self, day: dt.date) -> list[SlotAvailability]:
        return availability.get_available_slots(self.store.all_reservations(), self.get_config(), day)

    # --- Reservations ---

    def create_reservation(self, reservation: Reservation, allow_overbooking: bool = False) -> Reservation:
        """Assigns the smallest free table and stores the reservation.

        Raises CapacityConflict when the slot cannot seat the party. With
        ``allow_overbooking`` the record is stored anyway, without a table.
        """
        with self._lock:
            result = self.check_availability(reservation.date, reservation.time, reservation.guests)
            if result.available and result.suggested_table is not None:
                reservation = reservation.model_copy(update={
                    "table_id": result.suggested_table.id,
                    "table_name": result.suggested_table.name,
                })
            elif not allow_overbooking:
                raise CapacityConflict(result)
            else:
                logger.warning(
                    "Overbooking %s %s for %d guests (reservation %s)",
                    reservation.date, reservation.time, reservation.guests, reservation.id,
                )
            self.store.insert_reservation(reservation)

        logger.info(
            "Reservation %s created for %s %s, %d guests, table %s",
            reservation.id, reservation.date, reservation.time, reservation.guests, reservation.table_id,
        )
        return reservation

    def get_reservation(self, reservation_id: str) -> Reservation:
        reservation = self.store.get_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFound(reservation_id)
        return reservation

    def update_reservation(self, reservation_id: str, **fields) -> Reservation:
        with self._lock:
            current = self.get_reservation(reservation_id)
            updated = current.model_copy(update={**fields, "updated_at": utc_now()})
            if not self.store.update_reservation(updated):
                raise ReservationNotFound(reservation_id)
        return updated

    def confirm(self, reservation_id: str) -> Reservation:
        reservation = self.update_reservation(
            reservation_id, status=Status.CONFIRMED, confirmed_at=utc_now()
        )
        logger.info("Reservation %s confirmed", reservation_id)
        return reservation

    def cancel(self, reservation_id: str, reason: str = "") -> Reservation:
        reservation = self.update_reservation(
            reservation_id,
            status=Status.CANCELLED,
            cancelled_at=utc_now(),
            cancellation_reason=reason or "",
        )
        logger.info("Reservation %s cancelled", reservation_id)
        return reservation

    def delete(self, reservation_id: str) -> None:
        with self._lock:
            if not self.store.delete_reservation(reservation_id):
                raise ReservationNotFound(reservation_id)
        logger.info("Reservation %s deleted", reservation_id)

    def list_reservations(
        self,
        day: dt.date | None = None,
        status: Status | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> ReservationPage:
        reservations = self.store.all_reservations()
        if day is not None:
            reservations = [r for r in reservations if r.date == day]
        if status is not None:
            reservations = [r for r in reservations if r.status is status]

        reservations.sort(key=lambda r: (r.date, r.time))
        start = (page - 1) * limit
        return ReservationPage(
            reservations=reservations[start:start + limit],
            total=len(reservations),
            page=page,
            total_pages=math.ceil(len(reservations) / limit),
        )

    # --- Dashboard ---

    def get_stats(self, today: dt.date | None = None) -> ReservationStats:
        return availability.get_stats(self.store.all_reservations(), today or local_today())

    def get_dashboard_data(self, day: dt.date) -> DashboardData:
        return availability.get_dashboard_data(self.store.all_reservations(), self.get_config(), day)
