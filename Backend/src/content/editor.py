"""
Éditeurs de fiches (projets, audio): machine à états du brouillon.

    closed -> editing(brouillon) -> saving -> closed        (succès)
                                          -> editing + error (échec)

Le brouillon est une copie profonde de la fiche stockée. La validation des champs requis et
des fichiers est faite avant tout appel réseau.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .assets import AUDIO_COVERS_FOLDER, AUDIO_FOLDER, PROJECT_IMAGES_FOLDER, AssetKind, AssetUploader
from .errors import AssetUploadError, ContentError, EditorStateError, RecordValidationError
from .schemas import AudioFile, Project, Record
from .session import Principal, SessionContext
from .store import RecordStore

logger = logging.getLogger(__name__)

Cleanup = Callable[[str], Any]


class EditorState(str, Enum):
    CLOSED = "closed"
    EDITING = "editing"
    SAVING = "saving"


@dataclass(frozen=True)
class AssetSlot:
    name: str        # clé du fichier dans la requête
    field: str       # attribut de la fiche qui reçoit l'URL
    folder: str
    kind: AssetKind
    critical: bool


class RecordEditor:
    record_type: Type = Project
    slots: Tuple[AssetSlot, ...] = ()

    def __init__(
        self,
        store: RecordStore,
        uploader: AssetUploader,
        session: SessionContext,
        cleanup: Optional[Cleanup] = None,
    ):
        self.store = store
        self.uploader = uploader
        self.session = session
        self.cleanup = cleanup or uploader.delete

        self.state = EditorState.CLOSED
        self.draft: Optional[Record] = None
        self.saved: Optional[Record] = None
        self.error: Optional[str] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    # -- ouverture / fermeture ---------------------------------------------

    def open_new(self, now: Optional[datetime] = None) -> Record:
        self._open(self.record_type.new(now))
        return self.draft

    def open_existing(self, record: Record) -> Record:
        if record.id is None:
            raise EditorStateError("La fiche à modifier n'a pas d'identifiant")
        self._open(copy.deepcopy(record))
        return self.draft

    def _open(self, draft: Record) -> None:
        self._require(EditorState.CLOSED)
        if not self.session.is_authenticated:
            raise EditorStateError("Connexion requise pour modifier le contenu")
        self.draft = draft
        self.saved = None
        self.error = None
        self.state = EditorState.EDITING
        self._unsubscribe = self.session.subscribe(self._on_session_change)

    def cancel(self) -> None:
        """Abandonne le brouillon, sans condition, depuis ``editing``."""
        if self.state == EditorState.SAVING:
            raise EditorStateError("Enregistrement en cours")
        if self.state == EditorState.EDITING:
            logger.info(f"[editor] Brouillon {self.collection} abandonné")
        self._close()

    def _close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.draft = None
        self.error = None
        self.state = EditorState.CLOSED

    def _on_session_change(self, principal: Optional[Principal]) -> None:
        if principal is None and self.state == EditorState.EDITING:
            self.cancel()

    # -- édition -----------------------------------------------------------

    @property
    def collection(self) -> str:
        return self.record_type.collection

    def edit(self, changes: Dict[str, Any]) -> Record:
        """Applique ``changes`` (noms de champs du document) au brouillon."""
        self._require(EditorState.EDITING)
        try:
            self.draft = self.draft.merged(changes)
        except RecordValidationError as e:
            self.error = str(e)
            raise
        self.error = None
        return self.draft

    def check_required(self, uploads: Dict[str, Any]) -> None:  # pragma: no cover - surchargé
        raise NotImplementedError

    def validate(self, uploads: Dict[str, Any]) -> None:
        self.check_required(uploads)
        for slot in self.slots:
            if slot.name in uploads:
                self.uploader.validate(uploads[slot.name], slot.kind)

    # -- enregistrement ----------------------------------------------------

    def save(self, uploads: Optional[Dict[str, Any]] = None) -> str:
        """
        Envoie les fichiers puis écrit la fiche (création ou remplacement complet).
        Renvoie l'identifiant; la fiche enregistrée reste disponible dans ``saved``.
        """
        self._require(EditorState.EDITING)
        uploads = {k: v for k, v in (uploads or {}).items() if v is not None}
        try:
            self.validate(uploads)
        except ContentError as e:
            self.error = str(e)
            raise

        self.state = EditorState.SAVING
        candidate = copy.deepcopy(self.draft)
        uploaded: List[str] = []
        replaced: List[str] = []
        try:
            for slot in self.slots:
                file = uploads.get(slot.name)
                if file is None:
                    continue
                try:
                    url = self.uploader.upload(file, slot.folder, slot.kind)
                except AssetUploadError as e:
                    if slot.critical:
                        raise
                    logger.warning(f"[editor] Upload '{slot.name}' ignoré: {e}")
                    continue
                uploaded.append(url)
                previous = getattr(candidate, slot.field)
                if previous and previous != url:
                    replaced.append(previous)
                setattr(candidate, slot.field, url)

            if candidate.id is None:
                candidate.id = self.store.create(self.collection, candidate.to_document())
            else:
                self.store.update(self.collection, candidate.id, candidate.to_document())
        except Exception as e:
            if not isinstance(e, ContentError):
                logger.exception(f"[editor] Échec inattendu de l'enregistrement {self.collection}")
            for url in uploaded:
                self.uploader.delete(url)
            self.state = EditorState.EDITING
            self.error = str(e)
            raise

        for url in replaced:
            self.cleanup(url)
        self.saved = candidate
        self._close()
        return candidate.id

    def _require(self, state: EditorState) -> None:
        if self.state != state:
            raise EditorStateError(f"Action impossible dans l'état '{self.state.value}'")


class ProjectEditor(RecordEditor):
    record_type = Project
    slots = (AssetSlot("image", "image_url", PROJECT_IMAGES_FOLDER, AssetKind.IMAGE, critical=True),)

    def check_required(self, uploads):
        if not self.draft.title.strip() or not self.draft.description.strip():
            raise RecordValidationError("Veuillez remplir au moins le titre et la description")


class AudioEditor(RecordEditor):
    record_type = AudioFile
    slots = (
        AssetSlot("file", "file_url", AUDIO_FOLDER, AssetKind.AUDIO, critical=True),
        AssetSlot("cover", "cover_url", AUDIO_COVERS_FOLDER, AssetKind.COVER, critical=False),
    )

    def check_required(self, uploads):
        if not self.draft.title.strip():
            raise RecordValidationError("Veuillez remplir le titre")
        if not self.draft.file_url and "file" not in uploads:
            raise RecordValidationError("Veuillez sélectionner un fichier audio")


EDITORS = {
    Project.collection: ProjectEditor,
    AudioFile.collection: AudioEditor,
}


def delete_record(store: RecordStore, record: Record, cleanup: Cleanup) -> None:
    """Supprime la fiche puis ses fichiers; l'échec du nettoyage n'annule rien."""
    store.delete(record.collection, record.id)
    for url in record.asset_urls():
        cleanup(url)
