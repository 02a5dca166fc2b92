"""Human-readable change log and audit trail for reservation edits"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.engine.periods import as_local_date
from app.schemas.reservation import ReservationResponse
from app.schemas.shift import ShiftResponse

MODIFIED_TAG = "alterada"
CANCELLED_TAG = "cancelada"


def _format_day(value) -> str:
    return as_local_date(value).strftime("%d/%m/%Y")


def _format_stamp(now: datetime) -> str:
    return now.strftime("%d/%m/%Y às %H:%M")


def generate_change_log(
    old: ReservationResponse,
    new_data: Mapping[str, Any],
    shifts: Optional[Sequence[ShiftResponse]] = None,
) -> List[str]:
    """Describe date, time, party-size and shift changes between ``old`` and ``new_data``"""
    changes = []

    new_date = new_data.get("date")
    if new_date and as_local_date(new_date) != old.date:
        changes.append(f"Data alterada de {_format_day(old.date)} para {_format_day(new_date)}")

    new_slot = new_data.get("slot_time")
    if new_slot and new_slot != old.slot_time:
        changes.append(f"Horário alterado de {old.slot_time} para {new_slot}")

    new_party_size = new_data.get("party_size")
    if new_party_size and new_party_size != old.party_size:
        changes.append(f"Quantidade de pessoas alterada de {old.party_size} para {new_party_size}")

    new_shift_id = new_data.get("shift_id")
    if new_shift_id and new_shift_id != old.shift_id and shifts:
        old_shift = next((s for s in shifts if s.id == old.shift_id), None)
        new_shift = next((s for s in shifts if s.id == new_shift_id), None)
        if old_shift and new_shift:
            changes.append(f"Turno alterado de {old_shift.name} para {new_shift.name}")

    return changes


def build_modification_note(changes: Sequence[str], source: str, now: datetime) -> str:
    if not changes:
        return ""
    source_text = "(alterado pelo cliente online)" if source == "online" else "(alterado pelo admin)"
    lines = "\n".join(f"• {change}" for change in changes)
    return f"\n\n🔄 Reserva alterada em {_format_stamp(now)} {source_text}:\n{lines}"


def add_modification(
    reservation: ReservationResponse,
    changes: Sequence[str],
    modified_by: str,
    now: datetime,
) -> Dict[str, Any]:
    """Fields to persist after an edit: the ``alterada`` tag and a new log entry"""
    tags = list(reservation.tags)
    if MODIFIED_TAG not in tags:
        tags.append(MODIFIED_TAG)

    log = [entry.model_dump(mode="json") for entry in reservation.modification_log]
    log.append({
        "timestamp": now.isoformat(),
        "changes": "; ".join(changes),
        "modified_by": modified_by,
    })
    return {"tags": tags, "modification_log": log}


def add_cancellation(
    reservation: ReservationResponse,
    reason: Optional[str],
    cancelled_by: str,
    now: datetime,
) -> Dict[str, Any]:
    """Fields to persist when cancelling: tag, log entry, note and ``cancelled_at``"""
    tags = list(reservation.tags)
    if CANCELLED_TAG not in tags:
        tags.append(CANCELLED_TAG)

    log = [entry.model_dump(mode="json") for entry in reservation.modification_log]
    log.append({
        "timestamp": now.isoformat(),
        "changes": f"Reserva cancelada: {reason}" if reason else "Reserva cancelada",
        "modified_by": cancelled_by,
    })

    source_text = "(cancelado pelo cliente online)" if cancelled_by == "online" else "(cancelado pelo admin)"
    note = f"\n\n❌ Reserva cancelada em {_format_stamp(now)} {source_text}"
    if reason:
        note += f"\nMotivo: {reason}"

    return {
        "tags": tags,
        "modification_log": log,
        "notes": (reservation.notes or "") + note,
        "cancelled_at": now,
    }
