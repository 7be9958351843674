from __future__ import annotations

from enum import Enum


class Presence(str, Enum):
    """Presence axis of an attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    PAID_LEAVE = "paid_leave"


class AttendanceType(str, Enum):
    """Normal (office duty) vs project attendance."""

    NORMAL = "normal"
    PROJECT = "project"


class Scope(str, Enum):
    """Partition filter used when fetching and aggregating a month."""

    ALL = "all"
    PROJECT = "project"
    NORMAL = "normal"


class DayBadge(str, Enum):
    """Derived badge for one worker on one calendar day."""

    PAID_LEAVE = "paid_leave"
    MIXED = "mixed"
    PRESENT = "present"
    ABSENT = "absent"
    EMPTY = "empty"


class ValidationErrorKind(str, Enum):
    MISSING_FIELD = "MissingField"
    INVALID_LEAVE_PROJECT = "InvalidLeaveProject"
    NON_ZERO_HOURS_ON_ABSENCE = "NonZeroHoursOnAbsence"
    HOURS_OUT_OF_RANGE = "HoursOutOfRange"
    MISSING_PROJECT_REFERENCE = "MissingProjectReference"
    DUPLICATE_PAID_LEAVE = "DuplicatePaidLeave"
