"""
Export JSON des collections (une seule ou toutes).
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from django.utils import timezone

from .errors import RecordValidationError
from .schemas import RECORD_TYPES
from .session import SessionContext
from .store import RecordStore
from .timestamps import serialize_timestamps

logger = logging.getLogger(__name__)

EXPORT_ALL = "all"
EXPORT_TARGETS = tuple(RECORD_TYPES) + (EXPORT_ALL,)


@dataclass
class ExportDocument:
    filename: str
    payload: Dict[str, Any]
    count: int

    def render(self) -> bytes:
        return json.dumps(self.payload, indent=2, ensure_ascii=False).encode("utf-8")


class Exporter:
    def __init__(
        self,
        store: RecordStore,
        session: SessionContext,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.session = session
        self.clock = clock or timezone.now

    def _records(self, collection: str):
        # documents tels que stockés: tout horodatage natif, où qu'il soit, devient ISO-8601
        return [serialize_timestamps(doc) for doc in self.store.raw_list(collection)]

    def build(self, target: str) -> ExportDocument:
        if target not in EXPORT_TARGETS:
            raise RecordValidationError(f"Export inconnu: {target!r}")

        now = self.clock()
        header = {"exportedAt": now.isoformat(), "exportedBy": self.session.email or None}

        if target == EXPORT_ALL:
            collections = {name: self._records(name) for name in RECORD_TYPES}
            payload = {**header, "collections": collections}
            count = sum(len(docs) for docs in collections.values())
        else:
            data = self._records(target)
            payload = {**header, "collection": target, "data": data}
            count = len(data)

        filename = f"dev4com-export-{target}-{timezone.localdate(now).isoformat()}.json"
        logger.info(f"[export] {filename}: {count} document(s)")
        return ExportDocument(filename=filename, payload=payload, count=count)
