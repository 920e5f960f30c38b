"""
Availability engine.

Pure functions over a list of reservations and the restaurant
configuration. Nothing here touches storage; the reservation service
loads the documents and passes them in.

Capacity is derived live from every pending or confirmed booking at the
same date and time, while table assignment only looks at the tables those
bookings hold. Both conditions must pass for a slot to be available.
"""

import datetime as dt
import math
from collections.abc import Iterable

from ..schemas import (
    AvailabilityResult,
    DashboardData,
    Reservation,
    ReservationStats,
    RestaurantConfig,
    ServiceSummary,
    SlotAvailability,
    Status,
)

SLOT_FULL_MESSAGE = "Ce créneau est complet. Veuillez choisir un autre horaire."
MAX_SUGGESTIONS = 3


def active_for_slot(reservations: Iterable[Reservation], day: dt.date, time: str) -> list[Reservation]:
    return [r for r in reservations if r.date == day and r.time == time and r.is_active]


def check_availability(
    reservations: list[Reservation],
    config: RestaurantConfig,
    day: dt.date,
    time: str,
    guests: int,
    suggest: bool = True,
) -> AvailabilityResult:
    """Decides whether a party of ``guests`` fits at ``day``/``time``.

    When it does, the smallest free table that seats the party is
    suggested. When it does not, up to three alternate slots on the same
    day are proposed unless ``suggest`` is false.
    """
    booked = active_for_slot(reservations, day, time)
    occupied = sum(r.guests for r in booked)
    available_capacity = config.total_capacity - occupied

    held = {r.table_id for r in booked if r.table_id is not None}
    candidates = sorted(
        (t for t in config.tables if t.id not in held and t.capacity >= guests),
        key=lambda t: t.capacity,
    )

    if not candidates or available_capacity < guests:
        return AvailabilityResult(
            available=False,
            message=SLOT_FULL_MESSAGE,
            suggested_times=get_suggested_times(reservations, config, day, guests) if suggest else None,
        )

    return AvailabilityResult(
        available=True,
        suggested_table=candidates[0],
        remaining_capacity=available_capacity - guests,
    )


def get_suggested_times(
    reservations: list[Reservation],
    config: RestaurantConfig,
    day: dt.date,
    guests: int,
) -> list[str]:
    suggestions = []
    for time in config.time_slots.catalog():
        if check_availability(reservations, config, day, time, guests, suggest=False).available:
            suggestions.append(time)
            if len(suggestions) == MAX_SUGGESTIONS:
                break
    return suggestions


def get_available_slots(
    reservations: list[Reservation],
    config: RestaurantConfig,
    day: dt.date,
) -> list[SlotAvailability]:
    """Coarse per-slot occupancy for the booking widget. Tables are ignored."""
    total_capacity = config.total_capacity
    slots = []
    for time in config.time_slots.catalog():
        booked = active_for_slot(reservations, day, time)
        available_capacity = total_capacity - sum(r.guests for r in booked)
        slots.append(SlotAvailability(
            time=time,
            available=available_capacity > 0,
            available_capacity=available_capacity,
            reservation_count=len(booked),
        ))
    return slots


def get_stats(reservations: list[Reservation], today: dt.date) -> ReservationStats:
    active = [r for r in reservations if r.is_active]
    return ReservationStats(
        total=len(reservations),
        pending=sum(1 for r in reservations if r.status is Status.PENDING),
        confirmed=sum(1 for r in reservations if r.status is Status.CONFIRMED),
        cancelled=sum(1 for r in reservations if r.status is Status.CANCELLED),
        today_reservations=sum(1 for r in reservations if r.date == today),
        upcoming_reservations=sum(1 for r in active if r.date >= today),
        total_guests=sum(r.guests for r in active),
    )


def capacity_usage(guests: int, total_capacity: int) -> int:
    """Percentage of seats in use, rounded half up."""
    if total_capacity <= 0:
        return 0
    return math.floor(guests / total_capacity * 100 + 0.5)


def _summarize(reservations: list[Reservation], total_capacity: int) -> ServiceSummary:
    guests = sum(r.guests for r in reservations)
    return ServiceSummary(
        reservations=reservations,
        total_guests=guests,
        capacity_usage=capacity_usage(guests, total_capacity),
    )


def get_dashboard_data(
    reservations: list[Reservation],
    config: RestaurantConfig,
    day: dt.date,
) -> DashboardData:
    day_reservations = [r for r in reservations if r.date == day and r.is_active]
    lunch = [r for r in day_reservations if r.time in config.time_slots.lunch]
    dinner = [r for r in day_reservations if r.time in config.time_slots.dinner]

    total_capacity = config.total_capacity
    return DashboardData(
        date=day,
        lunch=_summarize(lunch, total_capacity),
        dinner=_summarize(dinner, total_capacity),
        tables=config.tables,
        total_capacity=total_capacity,
    )
