from datetime import date

from conftest import config_with
from voute.schemas import Status, default_config
from voute.services import availability

DAY = date(2026, 10, 24)


def test_empty_restaurant_offers_smallest_table():
    config = default_config()
    result = availability.check_availability([], config, DAY, "19:30", 2)

    assert result.available is True
    assert result.suggested_table.capacity == 2
    assert result.suggested_table.id == 1
    assert result.remaining_capacity == 84 - 2
    assert result.suggested_times is None


def test_picks_minimum_capacity_eligible_table():
    config = config_with(2, 2, 4, 6)
    result = availability.check_availability([], config, DAY, "19:30", 3)

    assert result.available is True
    assert result.suggested_table.capacity == 4
    assert result.suggested_table.id == 3


def test_ties_keep_configuration_order():
    config = config_with(6, 4, 4)
    result = availability.check_availability([], config, DAY, "12:00", 3)
    assert result.suggested_table.id == 2


def test_held_tables_are_skipped(make_reservation):
    config = config_with(2, 2, 4, 6)
    booked = [make_reservation(table_id=3, table_name="Table 3", guests=4)]
    result = availability.check_availability(booked, config, DAY, "19:30", 3)

    assert result.available is True
    assert result.suggested_table.id == 4
    assert result.remaining_capacity == 14 - 4 - 3


def test_party_larger_than_every_table_is_refused():
    config = config_with(6, 6, 6)
    result = availability.check_availability([], config, DAY, "19:30", 8)

    assert result.available is False
    assert result.message
    assert result.suggested_table is None
    assert result.suggested_times == []


def test_never_available_beyond_total_capacity(make_reservation):
    # Overbooked records carry no table, so tables look free while seats are gone.
    config = config_with(4, 4)
    booked = [make_reservation(guests=6, table_id=None)]
    result = availability.check_availability(booked, config, DAY, "19:30", 4)

    assert result.available is False
    assert result.remaining_capacity is None


def test_cancelled_reservations_free_their_table(make_reservation):
    config = config_with(2)
    booked = [make_reservation(table_id=1, status=Status.CANCELLED)]
    result = availability.check_availability(booked, config, DAY, "19:30", 2)

    assert result.available is True
    assert result.suggested_table.id == 1
    assert result.remaining_capacity == 0


def test_confirmed_reservations_hold_capacity(make_reservation):
    config = config_with(2)
    booked = [make_reservation(table_id=1, status=Status.CONFIRMED)]
    assert availability.check_availability(booked, config, DAY, "19:30", 1).available is False


def test_other_days_and_slots_do_not_count(make_reservation):
    config = config_with(2)
    booked = [
        make_reservation(table_id=1, time="20:00"),
        make_reservation(table_id=1, date=date(2026, 10, 25)),
    ]
    assert availability.check_availability(booked, config, DAY, "19:30", 2).available is True


def test_full_slot_suggests_first_three_open_slots(make_reservation):
    config = config_with(2)
    booked = [
        make_reservation(time="12:00", table_id=1),
        make_reservation(time="13:00", table_id=1),
    ]
    result = availability.check_availability(booked, config, DAY, "12:00", 2)

    assert result.available is False
    assert result.suggested_times == ["12:30", "19:00", "19:30"]
    for time in result.suggested_times:
        assert availability.check_availability(booked, config, DAY, time, 2).available is True


def test_suggested_times_are_capped(make_reservation):
    config = config_with(4)
    suggestions = availability.get_suggested_times([], config, DAY, 2)
    assert suggestions == ["12:00", "12:30", "13:00"]


def test_single_guest_bookings_fill_the_slot(make_reservation):
    config = default_config()
    total = config.total_capacity
    booked = [make_reservation(guests=1, time="20:00") for _ in range(total)]

    result = availability.check_availability(booked, config, DAY, "20:00", 1)

    assert result.available is False
    assert "20:00" not in result.suggested_times
    assert len(result.suggested_times) == 3


def test_available_slots_report_aggregate_occupancy(make_reservation):
    config = config_with(2, 4)
    booked = [
        make_reservation(time="19:00", guests=2, table_id=1),
        make_reservation(time="19:00", guests=4, table_id=2),
        make_reservation(time="20:00", guests=3, status=Status.CANCELLED),
    ]
    slots = {s.time: s for s in availability.get_available_slots(booked, config, DAY)}

    assert list(slots) == ["12:00", "12:30", "13:00", "19:00", "19:30", "20:00", "20:30"]
    assert slots["19:00"].available is False
    assert slots["19:00"].available_capacity == 0
    assert slots["19:00"].reservation_count == 2
    assert slots["20:00"].available_capacity == 6
    assert slots["20:00"].reservation_count == 0


def test_stats_counts(make_reservation):
    today = date(2026, 10, 17)
    reservations = [
        make_reservation(date=today, guests=2),
        make_reservation(date=date(2026, 10, 20), guests=4, status=Status.CONFIRMED),
        make_reservation(date=date(2026, 10, 20), guests=5, status=Status.CANCELLED),
        make_reservation(date=date(2026, 10, 1), guests=3, status=Status.CONFIRMED),
    ]
    stats = availability.get_stats(reservations, today)

    assert stats.total == 4
    assert stats.pending == 1
    assert stats.confirmed == 2
    assert stats.cancelled == 1
    assert stats.today_reservations == 1
    assert stats.upcoming_reservations == 2
    assert stats.total_guests == 2 + 4 + 3


def test_dashboard_splits_services(make_reservation):
    config = default_config()
    reservations = [
        make_reservation(time="12:00", guests=4),
        make_reservation(time="13:00", guests=6, status=Status.CONFIRMED),
        make_reservation(time="19:30", guests=8),
        make_reservation(time="20:30", guests=8),
        make_reservation(time="20:30", guests=5),
        make_reservation(time="19:00", guests=7, status=Status.CANCELLED),
        make_reservation(time="19:00", guests=2, date=date(2026, 10, 25)),
    ]
    data = availability.get_dashboard_data(reservations, config, DAY)

    assert data.total_capacity == 84
    assert len(data.tables) == 20
    assert data.lunch.total_guests == 10
    assert data.dinner.total_guests == 21
    assert data.lunch.capacity_usage == 12
    assert data.dinner.capacity_usage == 25
    assert len(data.lunch.reservations) == 2
    assert len(data.dinner.reservations) == 3

    day_guests = sum(r.guests for r in reservations if r.date == DAY and r.is_active)
    assert data.lunch.total_guests + data.dinner.total_guests == day_guests


def test_capacity_usage_rounds_half_up():
    assert availability.capacity_usage(1, 8) == 13
    assert availability.capacity_usage(0, 84) == 0
    assert availability.capacity_usage(5, 0) == 0
