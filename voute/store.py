"""
Record store for reservations and the restaurant configuration.

Both are kept as whole documents: every mutation reads the full
collection, changes it in memory and writes it back. Insertion order is
creation order and is never re-sorted on write.
"""

import copy
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from .errors import StorageError
from .extensions import db
from .models import Document
from .schemas import Reservation, RestaurantConfig
from .utils.time import utc_now

logger = logging.getLogger(__name__)

RESERVATIONS_KEY = "reservations"
CONFIG_KEY = "config"


class ReservationStore:
    """Repository over two documents. Subclasses provide raw reads and writes."""

    def _read(self, key: str) -> Any | None:
        raise NotImplementedError

    def _write(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def _load_rows(self) -> list[dict]:
        document = self._read(RESERVATIONS_KEY)
        if not document:
            return []
        return list(document.get("reservations", []))

    def _save_rows(self, rows: list[dict]) -> None:
        self._write(RESERVATIONS_KEY, {"reservations": rows})

    def all_reservations(self) -> list[Reservation]:
        return [Reservation.model_validate(row) for row in self._load_rows()]

    def get_reservation(self, reservation_id: str) -> Reservation | None:
        for row in self._load_rows():
            if row.get("id") == reservation_id:
                return Reservation.model_validate(row)
        return None

    def insert_reservation(self, reservation: Reservation) -> Reservation:
        rows = self._load_rows()
        rows.append(reservation.to_json())
        self._save_rows(rows)
        return reservation

    def update_reservation(self, reservation: Reservation) -> bool:
        """Replaces the stored record with the same id. Returns False if it is gone."""
        rows = self._load_rows()
        for index, row in enumerate(rows):
            if row.get("id") == reservation.id:
                rows[index] = reservation.to_json()
                self._save_rows(rows)
                return True
        return False

    def delete_reservation(self, reservation_id: str) -> bool:
        rows = self._load_rows()
        remaining = [row for row in rows if row.get("id") != reservation_id]
        if len(remaining) == len(rows):
            return False
        self._save_rows(remaining)
        return True

    def get_config(self) -> RestaurantConfig | None:
        document = self._read(CONFIG_KEY)
        if document is None:
            return None
        return RestaurantConfig.model_validate(document)

    def set_config(self, config: RestaurantConfig) -> None:
        self._write(CONFIG_KEY, config.to_json())


class InMemoryStore(ReservationStore):
    """Keeps documents in a dict. Values are copied in and out like a real store."""

    def __init__(self, documents: dict[str, Any] | None = None):
        self._documents = copy.deepcopy(documents) if documents else {}

    def _read(self, key):
        return copy.deepcopy(self._documents.get(key))

    def _write(self, key, value):
        self._documents[key] = copy.deepcopy(value)


class SqlDocumentStore(ReservationStore):
    """Stores each document as one JSON row of the ``documents`` table."""

    def _read(self, key):
        try:
            document = db.session.get(Document, key)
        except SQLAlchemyError as e:
            logger.exception("Failed to read document %s", key)
            raise StorageError(f"Could not read {key}") from e
        return copy.deepcopy(document.body) if document is not None else None

    def _write(self, key, value):
        try:
            document = db.session.get(Document, key)
            if document is None:
                document = Document(key=key)
                db.session.add(document)
            document.body = value
            document.updated_at = utc_now()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Failed to write document %s", key)
            raise StorageError(f"Could not write {key}") from e
