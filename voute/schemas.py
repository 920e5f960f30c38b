import copy
import datetime as dt
import re
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StrictBool,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .defaults import DEFAULT_CONFIG, FALLBACK_CLOSED_DAYS, FALLBACK_SUNDAY_DINNER_CLOSED
from .utils.time import add_months, js_weekday, local_today

MAX_GUESTS = 8
MAX_MESSAGE_LENGTH = 500

FRENCH_PHONE = re.compile(r"^(?:(?:\+|00)33|0)\s*[1-9](?:[\s.-]*\d{2}){4}$")


def _check_weekdays(days: list[int] | None) -> list[int] | None:
    if days is not None and any(not 0 <= d <= 6 for d in days):
        raise ValueError("Closed days must be weekdays between 0 (Sunday) and 6 (Saturday).")
    return days


class CamelModel(BaseModel):
    """Base for documents stored and served with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Stored documents ---

class Status(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# Only these hold a seat; cancelled bookings never consume capacity.
ACTIVE_STATUSES = frozenset({Status.PENDING, Status.CONFIRMED})


class Table(CamelModel):
    id: int
    capacity: int = Field(..., gt=0)
    name: str


class TimeSlots(CamelModel):
    lunch: list[str] = Field(default_factory=list)
    dinner: list[str] = Field(default_factory=list)

    def catalog(self) -> list[str]:
        """All slots, lunch first, in configured order."""
        return [*self.lunch, *self.dinner]


class RestaurantConfig(CamelModel):
    model_config = ConfigDict(extra="allow")

    tables: list[Table]
    time_slots: TimeSlots
    closed_days: list[int] | None = None
    sunday_dinner_closed: bool | None = None
    service_duration: int = 120
    buffer_time: int = 15
    hours: dict[str, Any] | None = None
    menu: Any = None

    @field_validator("closed_days")
    @classmethod
    def validate_closed_days(cls, v):
        return _check_weekdays(v)

    @property
    def total_capacity(self) -> int:
        return sum(t.capacity for t in self.tables)

    @property
    def effective_closed_days(self) -> list[int]:
        return self.closed_days if self.closed_days is not None else list(FALLBACK_CLOSED_DAYS)

    @property
    def dinner_closed_on_sunday(self) -> bool:
        if self.sunday_dinner_closed is None:
            return FALLBACK_SUNDAY_DINNER_CLOSED
        return self.sunday_dinner_closed


def default_config() -> RestaurantConfig:
    return RestaurantConfig.model_validate(copy.deepcopy(DEFAULT_CONFIG))


class Reservation(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    date: dt.date
    time: str
    guests: int = Field(..., ge=1, le=MAX_GUESTS)
    message: str = ""
    status: Status = Status.PENDING
    table_id: int | None = None
    table_name: str | None = None
    created_at: dt.datetime
    confirmed_at: dt.datetime | None = None
    cancelled_at: dt.datetime | None = None
    cancellation_reason: str | None = None
    updated_at: dt.datetime | None = None
    ip: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def public_view(self) -> dict:
        """The subset a customer may see when looking up their booking."""
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date.isoformat(),
            "time": self.time,
            "guests": self.guests,
            "status": self.status.value,
        }


# --- Engine results ---

class AvailabilityResult(CamelModel):
    available: bool
    suggested_table: Table | None = None
    remaining_capacity: int | None = None
    message: str | None = None
    suggested_times: list[str] | None = None


class SlotAvailability(CamelModel):
    time: str
    available: bool
    available_capacity: int
    reservation_count: int


class ReservationStats(CamelModel):
    total: int
    pending: int
    confirmed: int
    cancelled: int
    today_reservations: int
    upcoming_reservations: int
    total_guests: int


class ServiceSummary(CamelModel):
    reservations: list[Reservation]
    total_guests: int
    capacity_usage: int


class DashboardData(CamelModel):
    date: dt.date
    lunch: ServiceSummary
    dinner: ServiceSummary
    tables: list[Table]
    total_capacity: int


class ReservationPage(CamelModel):
    reservations: list[Reservation]
    total: int
    page: int
    total_pages: int


# --- Requests ---

def booking_context(config: RestaurantConfig, today: dt.date | None = None, max_advance_months: int = 3) -> dict:
    """Validation context for requests whose rules depend on the restaurant configuration."""
    return {
        "config": config,
        "today": today or local_today(),
        "max_advance_months": max_advance_months,
    }


def _context_config(info: ValidationInfo) -> RestaurantConfig:
    config = (info.context or {}).get("config")
    return config if config is not None else default_config()


class CreateReservationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: str
    date: dt.date
    time: str
    guests: int = Field(..., ge=1, le=MAX_GUESTS)
    message: str = Field("", max_length=MAX_MESSAGE_LENGTH)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        if not FRENCH_PHONE.match(v):
            raise ValueError("Numéro de téléphone invalide")
        return re.sub(r"\D", "", v)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: dt.date, info: ValidationInfo) -> dt.date:
        context = info.context or {}
        today = context.get("today") or local_today()
        if v < today:
            raise ValueError("La date ne peut pas être dans le passé")

        months = context.get("max_advance_months", 3)
        if v > add_months(today, months):
            raise ValueError(f"Réservation possible jusqu'à {months} mois à l'avance")

        if js_weekday(v) in _context_config(info).effective_closed_days:
            raise ValueError("Le restaurant est fermé ce jour-là")
        return v

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str, info: ValidationInfo) -> str:
        config = _context_config(info)
        if v not in config.time_slots.catalog():
            raise ValueError("Créneau horaire invalide")

        day = info.data.get("date")
        if (
            day is not None
            and js_weekday(day) == 0
            and config.dinner_closed_on_sunday
            and v in config.time_slots.dinner
        ):
            raise ValueError("Le restaurant n'est pas ouvert le dimanche soir")
        return v


class AvailabilityQuery(BaseModel):
    date: dt.date


class SlotQuery(BaseModel):
    date: dt.date
    time: str
    guests: int = Field(..., ge=1, le=MAX_GUESTS)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: str, info: ValidationInfo) -> str:
        if v not in _context_config(info).time_slots.catalog():
            raise ValueError("Horaire invalide")
        return v


class ListReservationsQuery(BaseModel):
    date: dt.date | None = None
    status: Status | None = None
    page: int = Field(1, ge=1)
    limit: int = Field(50, ge=1, le=100)


class CancelRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    reason: str = Field("", max_length=MAX_MESSAGE_LENGTH)


class SettingsUpdate(CamelModel):
    model_config = ConfigDict(extra="allow")

    closed_days: list[int] | None = None
    sunday_dinner_closed: StrictBool | None = None
    hours: dict[str, Any] | None = None

    @field_validator("closed_days")
    @classmethod
    def validate_closed_days(cls, v):
        return _check_weekdays(v)
