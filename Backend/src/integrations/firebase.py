"""
Client Firestore (firebase-admin), créé à la première utilisation.
"""

from __future__ import annotations
import os, logging
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore
from google.auth.exceptions import DefaultCredentialsError
from django.conf import settings

__all__ = ["is_configured", "get_firestore_client", "FirebaseConfigError"]

logger = logging.getLogger(__name__)


class FirebaseConfigError(RuntimeError):
    """Identifiants Firebase absents ou invalides."""


def _setting(name: str) -> str:
    return (getattr(settings, name, None) or os.getenv(name) or "").strip()


def is_configured() -> bool:
    """True si un compte de service ou un projet Firebase est renseigné."""
    return bool(_setting("FIREBASE_CREDENTIALS") or _setting("FIREBASE_PROJECT_ID"))


def _get_app() -> firebase_admin.App:
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass  # pas encore initialisée

    cred_path = _setting("FIREBASE_CREDENTIALS")
    project_id = _setting("FIREBASE_PROJECT_ID")
    try:
        cred = credentials.Certificate(cred_path) if cred_path else credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, {"projectId": project_id} if project_id else None)
    except (ValueError, OSError) as e:
        logger.error(f"[firebase] Initialisation impossible: {e}")
        raise FirebaseConfigError(f"Firebase mal configuré (FIREBASE_CREDENTIALS): {e}") from e
    logger.info(f"[firebase] Application initialisée (projet={project_id or 'défaut'})")
    return app


def get_firestore_client() -> Any:
    try:
        return firestore.client(_get_app())
    except DefaultCredentialsError as e:
        logger.error(f"[firebase] Identifiants introuvables: {e}")
        raise FirebaseConfigError("Identifiants Firebase introuvables") from e
