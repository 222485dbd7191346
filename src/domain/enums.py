"""Domain enumerations and state-transition rules."""

import enum


class RideStatus(str, enum.Enum):
    OPEN = "OPEN"
    CANCELLED = "CANCELLED"


# State machine: maps current status -> set of valid next statuses
RIDE_TRANSITIONS: dict[RideStatus, set[RideStatus]] = {
    RideStatus.OPEN: {RideStatus.CANCELLED},
    RideStatus.CANCELLED: set(),
}
