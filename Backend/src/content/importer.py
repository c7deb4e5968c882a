"""
Import en masse de projets depuis un tableau JSON.

    select -> preview(projets normalisés) -> importing(progression) -> complete(succès, erreurs)

Les créations sont faites une par une, dans l'ordre du fichier; l'échec d'un projet est
noté et n'arrête pas les suivants.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from django.utils import timezone

from .errors import ContentError, ImportFormatError, RecordValidationError
from .schemas import Project, migrate_document
from .session import SessionContext
from .store import RecordStore

logger = logging.getLogger(__name__)

TEMPLATE_FILENAME = "template-projets-import.json"


class ImportStep(str, Enum):
    SELECT = "select"
    PREVIEW = "preview"
    IMPORTING = "importing"
    COMPLETE = "complete"


def normalize_item(item: Any, index: int) -> Project:
    """Élément ``index`` (base 0) du tableau -> Project, champs absents mis à leur valeur par défaut."""
    if not isinstance(item, dict):
        raise ImportFormatError(f"Élément {index + 1}: un objet JSON est attendu")
    data = {k: v for k, v in item.items() if k not in ("id", "schemaVersion")}
    data["title"] = data.get("title") or f"Projet {index + 1}"
    if not data.get("createdAt"):
        data["createdAt"] = timezone.now()
    # anciens noms (image, tech, url...) acceptés comme à la lecture
    doc = migrate_document(Project.collection, data)
    try:
        return Project.from_document(None, doc, strict=True)
    except RecordValidationError as e:
        raise ImportFormatError(f"{data['title']}: {e}") from e


def parse_projects(payload: Any) -> List[Project]:
    if not isinstance(payload, list):
        raise ImportFormatError("Le JSON doit contenir un tableau de projets")
    return [normalize_item(item, i) for i, item in enumerate(payload)]


class BulkImporter:
    def __init__(
        self,
        store: RecordStore,
        session: SessionContext,
        on_refresh: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.session = session
        self.on_refresh = on_refresh
        self._reset()

    def _reset(self) -> None:
        self.step = ImportStep.SELECT
        self.records: List[Project] = []
        self.progress: Tuple[int, int] = (0, 0)
        self.success_count = 0
        self.errors: List[str] = []
        self.error: Optional[str] = None

    # -- select -> preview -------------------------------------------------

    def load_text(self, text: Optional[str]) -> List[Project]:
        self._require(ImportStep.SELECT)
        if not text or not text.strip():
            return self._fail("Veuillez saisir du JSON")
        return self._load(text)

    def load_file(self, uploaded) -> List[Project]:
        self._require(ImportStep.SELECT)
        name = getattr(uploaded, "name", "") or ""
        if not name.lower().endswith(".json"):
            return self._fail("Le fichier doit être au format JSON")
        try:
            text = uploaded.read().decode("utf-8-sig")
        except UnicodeDecodeError:
            return self._fail("Le fichier n'est pas encodé en UTF-8")
        return self._load(text)

    def _load(self, text: str) -> List[Project]:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            return self._fail(f"JSON invalide (ligne {e.lineno}, colonne {e.colno}): {e.msg}")
        try:
            self.records = parse_projects(payload)
        except ImportFormatError as e:
            return self._fail(str(e))
        self.error = None
        self.step = ImportStep.PREVIEW
        logger.info(f"[import] {len(self.records)} projet(s) prêts à importer")
        return self.records

    def _fail(self, message: str):
        self.error = message
        self.step = ImportStep.SELECT
        raise ImportFormatError(message)

    def preview(self) -> List[Dict[str, Any]]:
        self._require(ImportStep.PREVIEW)
        return [{k: v for k, v in p.to_json().items() if k != "id"} for p in self.records]

    def back(self) -> None:
        """preview -> select, sans rien écrire."""
        self._require(ImportStep.PREVIEW)
        self._reset()

    # -- importing -> complete ---------------------------------------------

    def run(self) -> Dict[str, Any]:
        self._require(ImportStep.PREVIEW)
        self.step = ImportStep.IMPORTING
        total = len(self.records)
        self.progress = (0, total)
        self.success_count = 0
        self.errors = []

        for index, project in enumerate(self.records):
            try:
                project.id = self.store.create(Project.collection, project.to_document())
                self.success_count += 1
            except ContentError as e:
                logger.warning(f"[import] '{project.title}' non importé: {e}")
                self.errors.append(f"{project.title}: {e}")
            except Exception as e:
                logger.exception(f"[import] '{project.title}' non importé (erreur inattendue)")
                self.errors.append(f"{project.title}: {e}")
            self.progress = (index + 1, total)

        self.step = ImportStep.COMPLETE
        logger.info(
            f"[import] Terminé par {self.session.email or '?'}: "
            f"{self.success_count}/{total} importé(s), {len(self.errors)} erreur(s)"
        )
        return self.report()

    def report(self) -> Dict[str, Any]:
        current, total = self.progress
        return {
            "step": self.step.value,
            "progress": {"current": current, "total": total},
            "successCount": self.success_count,
            "errors": list(self.errors),
        }

    def close(self) -> None:
        done = self.step == ImportStep.COMPLETE
        self._reset()
        if done and self.on_refresh is not None:
            self.on_refresh()

    def _require(self, step: ImportStep) -> None:
        if self.step != step:
            raise ImportFormatError(f"Action impossible à l'étape '{self.step.value}'")


# ---------------------------------------------------------------------------
# Modèle téléchargeable
# ---------------------------------------------------------------------------

def build_template(now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    created = (now or timezone.now()).isoformat()
    return [
        {
            "title": "Projet E-commerce",
            "subtitle": "Site de vente en ligne moderne",
            "job": "Développement Full-Stack",
            "description": "Création d'une plateforme e-commerce complète avec gestion de panier, "
                           "paiement en ligne et espace client.",
            "imageUrl": "https://example.com/images/project1.jpg",
            "imagesUrl": [
                "https://example.com/images/project1-1.jpg",
                "https://example.com/images/project1-2.jpg",
            ],
            "technologies": ["React", "Next.js", "TypeScript", "Tailwind CSS", "Stripe"],
            "icons": ["react", "nextjs", "typescript", "tailwind", "stripe"],
            "tags": ["E-commerce", "Full-Stack", "Responsive"],
            "links": {
                "app_link": "https://example-ecommerce.com",
                "repository": "https://github.com/exemple/ecommerce",
                "maquette": "https://figma.com/file/exemple",
                "swagger_yaml": "https://example-ecommerce.com/api/openapi.yaml",
                "credentials": [{"email": "demo@example.com", "password": "demo123"}],
                "conversion_details": ["+35% de conversions après la refonte"],
            },
            "status": "Completed",
            "createdAt": created,
            "client": "Client Exemple SAS",
        },
        {
            "title": "Application Mobile",
            "subtitle": "App de gestion de tâches",
            "job": "Développement Mobile",
            "description": "Application mobile cross-platform pour la gestion de projets et de "
                           "tâches avec synchronisation cloud.",
            "imageUrl": "https://example.com/images/project2.jpg",
            "imagesUrl": [],
            "technologies": ["React Native", "Firebase", "Redux"],
            "icons": ["react", "firebase"],
            "tags": ["Mobile", "Productivité", "Cloud"],
            "links": {
                "app_link": "https://play.google.com/store/exemple",
                "repository": "https://github.com/exemple/mobile-app",
            },
            "status": "In Progress",
            "createdAt": created,
            "client": "Startup Innovation",
        },
        {
            "title": "Site Vitrine",
            "subtitle": "Présentation entreprise",
            "job": "Développement Web",
            "description": "Site vitrine élégant et responsive pour présenter les services et "
                           "l'équipe de l'entreprise.",
            "imageUrl": "https://example.com/images/project3.jpg",
            "imagesUrl": ["https://example.com/images/project3-1.jpg"],
            "technologies": ["HTML5", "CSS3", "JavaScript", "GSAP"],
            "icons": ["html", "css", "javascript"],
            "tags": ["Vitrine", "Responsive", "Animation"],
            "links": {
                "app_link": "https://example-vitrine.com",
                "maquette": "https://figma.com/file/vitrine",
            },
            "status": "Completed",
            "createdAt": created,
            "client": "Entreprise Consulting",
        },
    ]


def render_template(now: Optional[datetime] = None) -> bytes:
    return json.dumps(build_template(now), indent=2, ensure_ascii=False).encode("utf-8")
