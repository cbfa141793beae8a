"""
Trip-related enumerations.
"""

import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration."""
    DRAFT = "draft"  # Created, cargo pending dispatch
    DISPATCHED = "dispatched"  # Vehicle and driver on the road
    COMPLETED = "completed"  # Delivered (terminal)
    CANCELLED = "cancelled"  # Called off (terminal)


# Allowed lifecycle edges; anything not listed is rejected
TRIP_TRANSITIONS = {
    TripStatus.DRAFT: {TripStatus.DISPATCHED, TripStatus.CANCELLED},
    TripStatus.DISPATCHED: {TripStatus.COMPLETED, TripStatus.CANCELLED},
    TripStatus.COMPLETED: set(),
    TripStatus.CANCELLED: set(),
}
