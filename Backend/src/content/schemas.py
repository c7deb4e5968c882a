"""
Schéma des documents Firestore: collections ``projects`` et ``audio``.

Les noms de champs côté document (et côté API) sont ceux du site: ``imageUrl``,
``imagesUrl``, ``createdAt``... Les documents écrits portent ``schemaVersion``; ceux qui
n'en ont pas viennent de l'ancienne version du site (champs ``image``, ``tech``, ``url``)
et sont migrés une seule fois, à la lecture, par ``migrate_document``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Type, Union

from django.utils import timezone

from .errors import RecordValidationError
from .timestamps import serialize_timestamps, to_datetime

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2


class ProjectStatus(str, Enum):
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


class AudioStatus(str, Enum):
    PROCESSING = "Processing"
    PUBLISHED = "Published"
    ARCHIVED = "Archived"


AUDIO_CATEGORIES = ("Musique", "Podcast", "Voix Off", "Sound Design", "Jingle", "Autre")
DEFAULT_AUDIO_CATEGORY = "Autre"
NEW_AUDIO_CATEGORY = "Musique"


# ---------------------------------------------------------------------------
# Coercition des valeurs brutes
# ---------------------------------------------------------------------------

def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _text_list(value: Any) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v) for v in value if v is not None]


def _status(value: Any, enum: Type[Enum], default: Enum, *, strict: bool) -> Enum:
    if value in (None, ""):
        return default
    if isinstance(value, enum):
        return value
    try:
        return enum(value)
    except ValueError:
        if strict:
            allowed = ", ".join(s.value for s in enum)
            raise RecordValidationError(f"Statut invalide: {value!r} (attendu: {allowed})")
        logger.warning(f"[schema] Statut inconnu {value!r}, remplacé par {default.value!r}")
        return default


# date fixe des fiches sans createdAt: tri stable, en dernier
UNDATED = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


def _created_at(value: Any) -> datetime:
    return to_datetime(value) or UNDATED


# ---------------------------------------------------------------------------
# Migration des anciens documents
# ---------------------------------------------------------------------------

def _migrate_project_v1(data: Dict[str, Any]) -> Dict[str, Any]:
    doc = {k: v for k, v in data.items() if k not in {"image", "tech", "url"}}
    doc["imageUrl"] = data.get("imageUrl") or data.get("image") or ""
    doc["technologies"] = data.get("technologies") or data.get("tech") or []
    if not data.get("links"):
        doc["links"] = {
            "app_link": data.get("app_link") or data.get("url") or "",
            "repository": data.get("repository") or "",
            "maquette": data.get("maquette") or "",
        }
        for legacy in ("app_link", "repository", "maquette"):
            doc.pop(legacy, None)
    return doc


def _migrate_audio_v1(data: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(data)
    doc["category"] = data.get("category") or DEFAULT_AUDIO_CATEGORY
    return doc


_MIGRATIONS = {
    "projects": {1: _migrate_project_v1},
    "audio": {1: _migrate_audio_v1},
}


def migrate_document(collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Amène un document brut au schéma courant (``SCHEMA_VERSION``)."""
    doc = dict(data or {})
    version = doc.get("schemaVersion") or 1
    steps = _MIGRATIONS.get(collection, {})
    while version < SCHEMA_VERSION:
        step = steps.get(version)
        if step is not None:
            doc = step(doc)
        version += 1
    doc["schemaVersion"] = SCHEMA_VERSION
    return doc


# ---------------------------------------------------------------------------
# Projets
# ---------------------------------------------------------------------------

@dataclass
class Credential:
    email: str = ""
    password: str = ""


@dataclass
class ProjectLinks:
    app_link: str = ""
    repository: str = ""
    maquette: str = ""
    swagger_yaml: str = ""
    credentials: List[Credential] = field(default_factory=list)
    conversion_details: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, data: Any) -> "ProjectLinks":
        if not isinstance(data, dict):
            return cls()
        credentials = [
            Credential(email=_text(c.get("email")), password=_text(c.get("password")))
            for c in data.get("credentials") or []
            if isinstance(c, dict)
        ]
        return cls(
            app_link=_text(data.get("app_link")),
            repository=_text(data.get("repository")),
            maquette=_text(data.get("maquette")),
            swagger_yaml=_text(data.get("swagger_yaml")),
            credentials=credentials,
            conversion_details=_text_list(data.get("conversion_details")),
        )

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "app_link": self.app_link,
            "repository": self.repository,
            "maquette": self.maquette,
        }
        # champs optionnels: absents du document tant qu'ils sont vides
        if self.swagger_yaml:
            doc["swagger_yaml"] = self.swagger_yaml
        if self.credentials:
            doc["credentials"] = [{"email": c.email, "password": c.password} for c in self.credentials]
        if self.conversion_details:
            doc["conversion_details"] = list(self.conversion_details)
        return doc


class _Record:
    """Comportement commun aux deux types de documents."""

    collection: ClassVar[str] = ""
    id: Optional[str]

    def to_document(self) -> Dict[str, Any]:  # pragma: no cover - surchargé
        raise NotImplementedError

    @classmethod
    def from_document(cls, doc_id: Optional[str], data: Dict[str, Any], *, strict: bool = False):
        raise NotImplementedError  # pragma: no cover - surchargé

    def to_json(self) -> Dict[str, Any]:
        """Représentation API: id + document, horodatages en ISO-8601."""
        doc = self.to_document()
        doc.pop("schemaVersion", None)
        return {"id": self.id, **serialize_timestamps(doc)}

    def merged(self, changes: Dict[str, Any]):
        """Nouvelle instance avec ``changes`` (noms de champs du document) appliqués."""
        return type(self).from_document(self.id, {**self.to_document(), **changes}, strict=True)

    def asset_urls(self) -> List[str]:  # pragma: no cover - surchargé
        raise NotImplementedError


@dataclass
class Project(_Record):
    collection: ClassVar[str] = "projects"

    id: Optional[str] = None
    title: str = ""
    description: str = ""
    subtitle: str = ""
    job: str = ""
    client: str = ""
    image_url: str = ""
    images_url: List[str] = field(default_factory=list)
    technologies: List[str] = field(default_factory=list)
    icons: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    links: ProjectLinks = field(default_factory=ProjectLinks)
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    created_at: Optional[datetime] = None

    @classmethod
    def new(cls, now: Optional[datetime] = None) -> "Project":
        return cls(created_at=now or timezone.now())

    @classmethod
    def from_document(cls, doc_id, data, *, strict=False) -> "Project":
        doc = migrate_document(cls.collection, data)
        return cls(
            id=doc_id,
            title=_text(doc.get("title")),
            description=_text(doc.get("description")),
            subtitle=_text(doc.get("subtitle")),
            job=_text(doc.get("job")),
            client=_text(doc.get("client")),
            image_url=_text(doc.get("imageUrl")),
            images_url=_text_list(doc.get("imagesUrl")),
            technologies=_text_list(doc.get("technologies")),
            icons=_text_list(doc.get("icons")),
            tags=_text_list(doc.get("tags")),
            links=ProjectLinks.from_document(doc.get("links")),
            status=_status(doc.get("status"), ProjectStatus, ProjectStatus.IN_PROGRESS, strict=strict),
            created_at=_created_at(doc.get("createdAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "job": self.job,
            "description": self.description,
            "imageUrl": self.image_url,
            "imagesUrl": list(self.images_url),
            "technologies": list(self.technologies),
            "icons": list(self.icons),
            "tags": list(self.tags),
            "links": self.links.to_document(),
            "status": self.status.value,
            "createdAt": self.created_at,
            "client": self.client,
            "schemaVersion": SCHEMA_VERSION,
        }

    def asset_urls(self) -> List[str]:
        return [self.image_url] if self.image_url else []


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

@dataclass
class AudioFile(_Record):
    collection: ClassVar[str] = "audio"

    id: Optional[str] = None
    title: str = ""
    file_url: str = ""
    description: str = ""
    artist: str = ""
    category: str = DEFAULT_AUDIO_CATEGORY
    cover_url: str = ""
    duration: int = 0
    status: AudioStatus = AudioStatus.PROCESSING
    created_at: Optional[datetime] = None

    @classmethod
    def new(cls, now: Optional[datetime] = None) -> "AudioFile":
        return cls(category=NEW_AUDIO_CATEGORY, created_at=now or timezone.now())

    @classmethod
    def from_document(cls, doc_id, data, *, strict=False) -> "AudioFile":
        doc = migrate_document(cls.collection, data)
        try:
            duration = max(0, int(round(float(doc.get("duration") or 0))))
        except (TypeError, ValueError):
            duration = 0
        return cls(
            id=doc_id,
            title=_text(doc.get("title")),
            file_url=_text(doc.get("fileUrl")),
            description=_text(doc.get("description")),
            artist=_text(doc.get("artist")),
            category=_text(doc.get("category")) or DEFAULT_AUDIO_CATEGORY,
            cover_url=_text(doc.get("coverUrl")),
            duration=duration,
            status=_status(doc.get("status"), AudioStatus, AudioStatus.PROCESSING, strict=strict),
            created_at=_created_at(doc.get("createdAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "artist": self.artist,
            "category": self.category,
            "fileUrl": self.file_url,
            "coverUrl": self.cover_url,
            "duration": self.duration,
            "status": self.status.value,
            "createdAt": self.created_at,
            "schemaVersion": SCHEMA_VERSION,
        }

    def asset_urls(self) -> List[str]:
        return [u for u in (self.file_url, self.cover_url) if u]


Record = Union[Project, AudioFile]

RECORD_TYPES: Dict[str, Type[_Record]] = {
    Project.collection: Project,
    AudioFile.collection: AudioFile,
}


def record_type(collection: str) -> Type[_Record]:
    try:
        return RECORD_TYPES[collection]
    except KeyError:
        raise RecordValidationError(f"Collection inconnue: {collection!r}") from None
