"""
Restaurant configuration used until an admin saves settings.

These values are persisted as-is on first access; existing deployments
rely on the exact table list and slot catalog.
"""

_TABLE_CAPACITIES = (2, 2, 2, 4, 4, 4, 4, 6, 6, 6, 8, 8, 2, 4, 4, 2, 4, 6, 4, 2)

DEFAULT_CONFIG = {
    "tables": [
        {"id": i, "capacity": capacity, "name": f"Table {i}"}
        for i, capacity in enumerate(_TABLE_CAPACITIES, start=1)
    ],
    "timeSlots": {
        "lunch": ["12:00", "12:30", "13:00"],
        "dinner": ["19:00", "19:30", "20:00", "20:30"],
    },
    "serviceDuration": 120,
    "bufferTime": 15,
}

# Applied when the stored configuration has no value of its own.
FALLBACK_CLOSED_DAYS = [3, 4]
FALLBACK_SUNDAY_DINNER_CLOSED = True
