"""
API du contenu: listes publiques du site, CRUD admin, import, export, maintenance.
"""
from __future__ import annotations

import json
import logging

from django.http import HttpResponse
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .editor import EDITORS, delete_record
from .errors import ContentError, ImportFormatError, RecordValidationError
from .exporter import Exporter
from .importer import TEMPLATE_FILENAME, BulkImporter, render_template
from .schemas import AudioFile, Project
from .serializers import INPUT_SERIALIZERS, MaintenanceFlagSerializer
from .session import SessionContext
from .site_settings import get_flag, set_flag
from .store import public_audio, public_projects
from .tasks import schedule_asset_deletion

logger = logging.getLogger(__name__)


def _attachment(content: bytes, filename: str) -> HttpResponse:
    response = HttpResponse(content, content_type="application/json; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


class ContentAPIView(APIView):
    """Erreurs du contenu -> {"error": message}: 400 (validation) ou 502 (Firestore, S3)."""

    permission_classes = [permissions.IsAuthenticated]

    def handle_exception(self, exc):
        if isinstance(exc, ContentError):
            code = status.HTTP_502_BAD_GATEWAY if exc.upstream else status.HTTP_400_BAD_REQUEST
            return Response({"error": str(exc)}, status=code)
        return super().handle_exception(exc)


# ---------------------------------------------------------------------------
# 🌐 Site public
# ---------------------------------------------------------------------------

class PublicProjectsView(ContentAPIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response([p.to_json() for p in public_projects(services.get_store())])


class PublicAudioView(ContentAPIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response([a.to_json() for a in public_audio(services.get_store())])


class PublicSettingView(ContentAPIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, flag):
        return Response(get_flag(services.get_store(), flag))


# ---------------------------------------------------------------------------
# 🛠️ Admin: fiches
# ---------------------------------------------------------------------------

def _matches(record, search: str) -> bool:
    if isinstance(record, Project):
        haystack = [record.title, record.client, *record.tags, *record.technologies]
    else:
        haystack = [record.title, record.artist, record.category]
    return any(search in (value or "").lower() for value in haystack)


def _changes(request, collection: str) -> dict:
    """Champs envoyés: corps JSON, ou champ ``data`` (chaîne JSON) d'un envoi multipart."""
    data = request.data
    raw = data.get("data") if hasattr(data, "get") else None
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RecordValidationError(f"Champ 'data' invalide: {e.msg}") from e
    serializer = INPUT_SERIALIZERS[collection](data=data)
    serializer.is_valid(raise_exception=True)
    return dict(serializer.validated_data)


class RecordListView(ContentAPIView):
    collection = Project.collection
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get(self, request):
        wanted_status = request.query_params.get("status") or None
        search = (request.query_params.get("search") or "").strip().lower()

        def keep(record) -> bool:
            if wanted_status and record.status.value != wanted_status:
                return False
            return not search or _matches(record, search)

        records = services.get_store().list(self.collection, keep)
        return Response([r.to_json() for r in records])

    def post(self, request):
        changes = _changes(request, self.collection)
        editor = EDITORS[self.collection](
            services.get_store(),
            services.get_uploader(),
            SessionContext.from_request(request),
            cleanup=schedule_asset_deletion,
        )
        editor.open_new()
        try:
            editor.edit(changes)
            editor.save({slot.name: request.FILES.get(slot.name) for slot in editor.slots})
        except ContentError:
            editor.cancel()
            raise
        return Response(editor.saved.to_json(), status=status.HTTP_201_CREATED)


class RecordDetailView(ContentAPIView):
    collection = Project.collection
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def _get_record(self, store, record_id):
        return store.get(self.collection, record_id)

    def put(self, request, record_id):
        store = services.get_store()
        record = self._get_record(store, record_id)
        if record is None:
            return Response({"error": "Fiche introuvable"}, status=status.HTTP_404_NOT_FOUND)

        changes = _changes(request, self.collection)
        editor = EDITORS[self.collection](
            store,
            services.get_uploader(),
            SessionContext.from_request(request),
            cleanup=schedule_asset_deletion,
        )
        editor.open_existing(record)
        try:
            editor.edit(changes)
            editor.save({slot.name: request.FILES.get(slot.name) for slot in editor.slots})
        except ContentError:
            editor.cancel()
            raise
        return Response(editor.saved.to_json())

    def delete(self, request, record_id):
        store = services.get_store()
        record = self._get_record(store, record_id)
        if record is None:
            return Response({"error": "Fiche introuvable"}, status=status.HTTP_404_NOT_FOUND)
        delete_record(store, record, schedule_asset_deletion)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProjectListView(RecordListView):
    collection = Project.collection


class ProjectDetailView(RecordDetailView):
    collection = Project.collection


class AudioListView(RecordListView):
    collection = AudioFile.collection


class AudioDetailView(RecordDetailView):
    collection = AudioFile.collection


# ---------------------------------------------------------------------------
# 📥 Import / 📤 Export
# ---------------------------------------------------------------------------

def _load_import(importer: BulkImporter, request) -> None:
    uploaded = request.FILES.get("file")
    if uploaded is not None:
        importer.load_file(uploaded)
    elif isinstance(request.data, dict):
        importer.load_text(request.data.get("json"))
    else:
        raise ImportFormatError("Le corps doit être un objet JSON avec un champ 'json'")


class ImportPreviewView(ContentAPIView):
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def post(self, request):
        importer = BulkImporter(services.get_store(), SessionContext.from_request(request))
        _load_import(importer, request)
        return Response({"step": importer.step.value, "projects": importer.preview()})


class ImportView(ContentAPIView):
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def post(self, request):
        store = services.get_store()
        refreshed = []
        importer = BulkImporter(
            store,
            SessionContext.from_request(request),
            on_refresh=lambda: refreshed.extend(store.list(Project.collection)),
        )
        _load_import(importer, request)
        report = importer.run()
        importer.close()
        report["projects"] = [p.to_json() for p in refreshed]
        return Response(report)


class ImportTemplateView(ContentAPIView):
    def get(self, request):
        return _attachment(render_template(), TEMPLATE_FILENAME)


class ExportView(ContentAPIView):
    def get(self, request, target):
        document = Exporter(services.get_store(), SessionContext.from_request(request)).build(target)
        response = _attachment(document.render(), document.filename)
        response["X-Export-Count"] = str(document.count)
        return response


# ---------------------------------------------------------------------------
# 🚧 Maintenance
# ---------------------------------------------------------------------------

class SettingView(ContentAPIView):
    def get(self, request, flag):
        return Response(get_flag(services.get_store(), flag))

    def put(self, request, flag):
        serializer = MaintenanceFlagSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        doc = set_flag(
            services.get_store(),
            flag,
            serializer.validated_data["enabled"],
            SessionContext.from_request(request),
        )
        return Response(doc)
