"""Table and shift availability engine.

Pure functions over in-memory snapshots of a restaurant's shifts, tables
and reservations. Callers fetch the data, run the engine, and persist the
decision atomically with a fresh re-validation.
"""

from app.engine.results import Err, ErrorKind, InvalidDateFormat, Ok, Result
from app.engine.periods import (
    day_of_week,
    occupation_period,
    parse_local_date,
    periods_overlap,
)
from app.engine.allocation import (
    allocate_tables,
    find_available_tables,
    find_best_table_combination,
    is_table_available,
)
from app.engine.validation import (
    validate_opening_hours,
    validate_party_size,
    validate_reservation,
    validate_shift_availability,
    validate_shift_capacity,
)
from app.engine.slots import generate_available_slots, iter_available_slots
from app.engine.reallocation import validate_and_reallocate_tables, validate_reinstatement
from app.engine.changes import (
    add_cancellation,
    add_modification,
    build_modification_note,
    generate_change_log,
)

__all__ = [
    "Err",
    "ErrorKind",
    "InvalidDateFormat",
    "Ok",
    "Result",
    "day_of_week",
    "occupation_period",
    "parse_local_date",
    "periods_overlap",
    "allocate_tables",
    "find_available_tables",
    "find_best_table_combination",
    "is_table_available",
    "validate_opening_hours",
    "validate_party_size",
    "validate_reservation",
    "validate_shift_availability",
    "validate_shift_capacity",
    "generate_available_slots",
    "iter_available_slots",
    "validate_and_reallocate_tables",
    "validate_reinstatement",
    "add_cancellation",
    "add_modification",
    "build_modification_note",
    "generate_change_log",
]
