"""
Domain errors raised by the reservation service and store.

A full slot is not an error for ``check_availability``; it only becomes
``CapacityConflict`` when a caller tries to book it anyway.
"""


class ReservationError(Exception):
    code = "RESERVATION_ERROR"
    status = 500


class ReservationNotFound(ReservationError):
    code = "NOT_FOUND"
    status = 404

    def __init__(self, reservation_id: str):
        super().__init__(f"Reservation {reservation_id} not found")
        self.reservation_id = reservation_id


class CapacityConflict(ReservationError):
    code = "SLOT_UNAVAILABLE"
    status = 409

    def __init__(self, availability):
        super().__init__(availability.message or "Slot unavailable")
        self.availability = availability


class StorageError(ReservationError):
    code = "STORAGE_ERROR"
    status = 500
