import uuid
from datetime import date, timedelta

import pytest

from voute.app import create_app
from voute.extensions import reservation_service
from voute.ratelimit import api_limiter, booking_limiter
from voute.schemas import Reservation, RestaurantConfig, Status
from voute.services.reservations import ReservationService
from voute.store import InMemoryStore
from voute.utils.time import js_weekday, utc_now

ADMIN_TOKEN = "test-admin-token"

TEST_SETTINGS = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "ADMIN_TOKEN": ADMIN_TOKEN,
    "RATE_MAX_BOOKINGS": 1000,
    "API_RATE_MAX_REQUESTS": 10000,
    "RESTAURANT_EMAIL": "salle@lavoutesavoie.fr",
    "MAIL_DEFAULT_SENDER": "reservations@lavoutesavoie.fr",
}


def next_weekday(js_day: int, after: date | None = None) -> date:
    """First day strictly after ``after`` (default today) with the given 0=Sunday weekday."""
    day = (after or date.today()) + timedelta(days=1)
    while js_weekday(day) != js_day:
        day += timedelta(days=1)
    return day


def config_with(*capacities, lunch=("12:00", "12:30", "13:00"), dinner=("19:00", "19:30", "20:00", "20:30")):
    return RestaurantConfig.model_validate({
        "tables": [
            {"id": i, "capacity": c, "name": f"Table {i}"}
            for i, c in enumerate(capacities, start=1)
        ],
        "timeSlots": {"lunch": list(lunch), "dinner": list(dinner)},
    })


@pytest.fixture
def make_reservation():
    def _make(**overrides) -> Reservation:
        fields = {
            "id": uuid.uuid4().hex,
            "name": "Camille Martin",
            "email": "camille@example.com",
            "phone": "0612345678",
            "date": date(2026, 10, 24),
            "time": "19:30",
            "guests": 2,
            "status": Status.PENDING,
            "created_at": utc_now(),
        }
        fields.update(overrides)
        return Reservation(**fields)

    return _make


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def service(store):
    return ReservationService(store)


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    api_limiter.clear()
    booking_limiter.clear()
    yield
    api_limiter.clear()
    booking_limiter.clear()


@pytest.fixture
def app():
    return create_app(TEST_SETTINGS, store=InMemoryStore())


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_service(app) -> ReservationService:
    with app.app_context():
        return reservation_service()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
