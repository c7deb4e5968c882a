"""
Conversion des horodatages Firestore.

Firestore renvoie des ``DatetimeWithNanoseconds`` (sous-classe de datetime); d'anciens
documents ou des imports peuvent contenir des chaînes ISO-8601 ou des objets protobuf
``Timestamp`` (méthode ``ToDatetime``).
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from django.utils.dateparse import parse_datetime


def _plain_utc(value: datetime) -> datetime:
    # datetime "simple" (pas la sous-classe Firestore), toujours en UTC
    plain = datetime.combine(value.date(), value.timetz())
    if plain.tzinfo is None:
        plain = plain.replace(tzinfo=timezone.utc)
    return plain.astimezone(timezone.utc)


def is_timestamp_like(value: Any) -> bool:
    if isinstance(value, datetime):
        return True
    return callable(getattr(value, "ToDatetime", None))


def to_datetime(value: Any) -> Optional[datetime]:
    """Horodatage natif, chaîne ISO ou date -> datetime UTC. None si illisible."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _plain_utc(value)
    if is_timestamp_like(value):
        return _plain_utc(value.ToDatetime())
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_datetime(text)
            if parsed is None:
                return to_datetime(date.fromisoformat(text))
        except ValueError:
            return None
        return _plain_utc(parsed)
    return None


def to_iso(value: Any) -> str:
    dt = to_datetime(value)
    if dt is None:
        raise ValueError(f"Horodatage illisible: {value!r}")
    return dt.isoformat()


def serialize_timestamps(value: Any) -> Any:
    """
    Parcours récursif: tout horodatage (à n'importe quelle profondeur) devient une
    chaîne ISO-8601, le reste est recopié.
    """
    if is_timestamp_like(value):
        return to_iso(value)
    if isinstance(value, dict):
        return {k: serialize_timestamps(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_timestamps(v) for v in value]
    return value
