"""
Accès Firestore pour les collections de contenu.

Le client est injecté (``google.cloud.firestore.Client`` en production, un faux en test);
seules les opérations de base sont utilisées: ``collection().stream()``, ``add()``,
``document().get()/set()/delete()``. Les écritures remplacent le document entier: pas de
contrôle de version, la dernière écriture gagne.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from google.api_core.exceptions import GoogleAPIError

from .errors import StoreError
from .schemas import AudioFile, AudioStatus, Project, ProjectStatus, Record, record_type

logger = logging.getLogger(__name__)

_LOAD_ERRORS = {
    "projects": "Erreur lors du chargement des projets",
    "audio": "Erreur lors du chargement des fichiers audio",
}


class RecordStore:
    def __init__(self, client: Any):
        self.client = client

    # -- lecture ------------------------------------------------------------

    def raw_list(self, collection: str) -> List[Dict[str, Any]]:
        """Documents bruts (id + champs tels que stockés), sans migration ni tri."""
        try:
            return [{"id": snap.id, **(snap.to_dict() or {})} for snap in self.client.collection(collection).stream()]
        except GoogleAPIError as e:
            logger.error(f"[store] Lecture de '{collection}' échouée: {e}")
            raise StoreError(_LOAD_ERRORS.get(collection, "Erreur lors du chargement")) from e

    def list(self, collection: str, predicate: Optional[Callable[[Record], bool]] = None) -> List[Record]:
        """
        Documents de la collection sous forme typée, du plus récent au plus ancien.
        ``predicate`` filtre à la lecture (ex: seulement l'audio publié côté site public).
        """
        cls = record_type(collection)
        records = []
        for raw in self.raw_list(collection):
            doc_id = raw.pop("id")
            record = cls.from_document(doc_id, raw)
            if predicate is None or predicate(record):
                records.append(record)
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def get(self, collection: str, doc_id: str) -> Optional[Record]:
        data = self.get_document(collection, doc_id)
        if data is None:
            return None
        return record_type(collection).from_document(doc_id, data)

    def get_document(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            snap = self.client.collection(collection).document(doc_id).get()
        except GoogleAPIError as e:
            logger.error(f"[store] Lecture de {collection}/{doc_id} échouée: {e}")
            raise StoreError(_LOAD_ERRORS.get(collection, "Erreur lors du chargement")) from e
        if not snap.exists:
            return None
        return snap.to_dict() or {}

    # -- écriture -----------------------------------------------------------

    def create(self, collection: str, fields: Dict[str, Any]) -> str:
        try:
            _, ref = self.client.collection(collection).add(fields)
        except GoogleAPIError as e:
            logger.error(f"[store] Création dans '{collection}' échouée: {e}")
            raise StoreError(f"Erreur lors de l'enregistrement: {e}") from e
        logger.info(f"[store] {collection}/{ref.id} créé")
        return ref.id

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        self.set_document(collection, doc_id, fields)
        logger.info(f"[store] {collection}/{doc_id} mis à jour")

    def set_document(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> None:
        try:
            self.client.collection(collection).document(doc_id).set(fields)
        except GoogleAPIError as e:
            logger.error(f"[store] Écriture de {collection}/{doc_id} échouée: {e}")
            raise StoreError(f"Erreur lors de l'enregistrement: {e}") from e

    def delete(self, collection: str, doc_id: str) -> None:
        try:
            self.client.collection(collection).document(doc_id).delete()
        except GoogleAPIError as e:
            logger.error(f"[store] Suppression de {collection}/{doc_id} échouée: {e}")
            raise StoreError("Erreur lors de la suppression") from e
        logger.info(f"[store] {collection}/{doc_id} supprimé")


# ---------------------------------------------------------------------------
# Listes publiques (le site) vs admin (tout)
# ---------------------------------------------------------------------------

def public_projects(store: RecordStore) -> List[Project]:
    return store.list(Project.collection, lambda p: p.status != ProjectStatus.ARCHIVED)


def public_audio(store: RecordStore) -> List[AudioFile]:
    return store.list(AudioFile.collection, lambda a: a.status == AudioStatus.PUBLISHED)
