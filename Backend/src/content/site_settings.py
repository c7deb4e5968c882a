"""
Drapeaux de maintenance: documents ``settings/maintenance`` et ``settings/audioMaintenance``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from django.utils import timezone

from .errors import RecordValidationError, StoreError
from .session import SessionContext
from .store import RecordStore
from .timestamps import serialize_timestamps

logger = logging.getLogger(__name__)

SETTINGS_COLLECTION = "settings"
MAINTENANCE_FLAGS = ("maintenance", "audioMaintenance")


def _check(flag: str) -> None:
    if flag not in MAINTENANCE_FLAGS:
        raise RecordValidationError(f"Paramètre inconnu: {flag!r}")


def get_flag(store: RecordStore, flag: str) -> Dict[str, Any]:
    """Document absent ou illisible: maintenance désactivée."""
    _check(flag)
    try:
        doc = store.get_document(SETTINGS_COLLECTION, flag)
    except StoreError as e:
        logger.warning(f"[settings] Lecture de {flag} impossible, considéré désactivé: {e}")
        doc = None
    doc = doc or {}
    return serialize_timestamps({**doc, "enabled": bool(doc.get("enabled", False))})


def set_flag(store: RecordStore, flag: str, enabled: bool, session: SessionContext) -> Dict[str, Any]:
    _check(flag)
    doc = {
        "enabled": bool(enabled),
        "updatedAt": timezone.now(),
        "updatedBy": session.email or None,
    }
    store.set_document(SETTINGS_COLLECTION, flag, doc)
    logger.info(f"[settings] {flag} = {doc['enabled']} (par {doc['updatedBy'] or '?'})")
    return serialize_timestamps(doc)
