from __future__ import annotations

from enum import Enum


class PersonCategory(str, Enum):
    """Kind of person subject to attendance and checkout rules."""

    RESIDENT = "resident"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Lifecycle state of an attendance record as stored in the database."""

    CHECKED_IN = "checked_in"
    PENDING = "pending"
    CHECKED_OUT = "checked_out"
    APPROVED = "approved"
    DECLINED = "declined"
