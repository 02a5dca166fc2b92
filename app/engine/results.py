"""Outcome values shared by the allocation engine.

Every validator returns either ``Ok(value)`` or ``Err(kind, message)``;
nothing in the engine raises for a booking that merely cannot be made.
Only malformed input (an unparseable date or clock time) raises
``InvalidDateFormat``.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, TypeVar, Union


T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """Why a booking or reallocation was refused"""
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    CLOSED_ON_THIS_DAY = "CLOSED_ON_THIS_DAY"
    SHIFT_INACTIVE_OR_UNKNOWN = "SHIFT_INACTIVE_OR_UNKNOWN"
    PAST_BOOKING_CUTOFF = "PAST_BOOKING_CUTOFF"
    SHIFT_CAPACITY_EXCEEDED = "SHIFT_CAPACITY_EXCEEDED"
    PARTY_SIZE_EXCEEDS_LIMIT = "PARTY_SIZE_EXCEEDS_LIMIT"
    NO_TABLES_AVAILABLE = "NO_TABLES_AVAILABLE"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"
    NO_AVAILABILITY = "NO_AVAILABILITY"


class InvalidDateFormat(ValueError):
    """Raised for a date that is not YYYY-MM-DD or a clock time that is not HH:MM"""
    kind = ErrorKind.INVALID_DATE_FORMAT


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    ok = True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str
    extra: Dict[str, Any] = field(default_factory=dict)

    ok = False


Result = Union[Ok[T], Err]
