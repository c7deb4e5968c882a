import json
from datetime import datetime, timezone
from io import StringIO

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import CommandError, call_command
from django.urls import reverse
from google.api_core.datetime_helpers import DatetimeWithNanoseconds

from content.assets import MB, AssetKind, AssetUploader
from content.editor import AudioEditor, EditorState, ProjectEditor, delete_record
from content.errors import (
    AssetUploadError,
    AssetValidationError,
    EditorStateError,
    ImportFormatError,
    RecordValidationError,
    StoreError,
)
from content.exporter import Exporter
from content.importer import BulkImporter, ImportStep, parse_projects, render_template
from content.schemas import AudioStatus, Project, ProjectStatus
from content.session import SessionContext
from content.site_settings import get_flag, set_flag
from content.store import public_audio, public_projects


def _image(name="photo.png", size=1024, content_type="image/png"):
    return SimpleUploadedFile(name, b"x" * size, content_type=content_type)


def _audio(name="son.mp3", size=2048):
    return SimpleUploadedFile(name, b"a" * size, content_type="audio/mpeg")


def _put(firestore, collection, doc_id, **fields):
    firestore.collection(collection).docs[doc_id] = {"schemaVersion": 2, **fields}


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

def test_list_sorts_newest_first_and_migrates_legacy_documents(firestore, store):
    _put(firestore, "projects", "new", title="Récent", createdAt=datetime(2025, 3, 1, tzinfo=timezone.utc))
    firestore.collection("projects").docs["old"] = {
        "title": "Ancien",
        "image": "https://cdn/ancien.png",
        "tech": ["PHP"],
        "url": "https://ancien.example",
        "createdAt": "2020-01-15T10:00:00Z",
    }

    projects = store.list("projects")
    assert [p.id for p in projects] == ["new", "old"]

    legacy = projects[1]
    assert legacy.image_url == "https://cdn/ancien.png"
    assert legacy.technologies == ["PHP"]
    assert legacy.links.app_link == "https://ancien.example"
    assert legacy.status == ProjectStatus.IN_PROGRESS
    assert legacy.created_at == datetime(2020, 1, 15, 10, tzinfo=timezone.utc)


def test_undated_documents_keep_a_fixed_date_and_sort_last(firestore, store):
    firestore.collection("projects").docs["undated"] = {"title": "Sans date"}
    _put(firestore, "projects", "dated", title="Daté", createdAt=datetime(2019, 6, 1, tzinfo=timezone.utc))

    first = store.list("projects")
    second = store.list("projects")
    assert [p.id for p in first] == ["dated", "undated"]
    assert first[1].created_at == second[1].created_at == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_legacy_audio_without_category_defaults_to_autre(firestore, store):
    firestore.collection("audio").docs["a1"] = {"title": "Jingle", "fileUrl": "https://cdn/a.mp3"}
    assert store.get("audio", "a1").category == "Autre"


def test_store_failure_is_a_single_load_error(firestore, store):
    firestore.fail_when = lambda op, coll, data: op == "stream"
    with pytest.raises(StoreError, match="Erreur lors du chargement des projets"):
        store.list("projects")


def test_public_audio_lists_only_published_admin_lists_all(firestore, store):
    for doc_id, status in [("p", "Published"), ("d", "Processing"), ("x", "Archived")]:
        _put(firestore, "audio", doc_id, title=doc_id, fileUrl=f"https://cdn/{doc_id}.mp3", status=status)

    assert [a.id for a in public_audio(store)] == ["p"]
    assert {a.id for a in store.list("audio")} == {"p", "d", "x"}


def test_public_projects_hide_archived(firestore, store):
    _put(firestore, "projects", "a", title="A", status="Completed")
    _put(firestore, "projects", "b", title="B", status="Archived")
    assert [p.id for p in public_projects(store)] == ["a"]


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

def test_upload_validation_fails_before_any_network_call(s3, uploader):
    with pytest.raises(AssetValidationError, match="10MB"):
        uploader.upload(_image(size=10 * MB + 1), "projects", AssetKind.IMAGE)
    with pytest.raises(AssetValidationError, match="image"):
        uploader.upload(_image(content_type="application/pdf"), "projects", AssetKind.IMAGE)
    with pytest.raises(AssetValidationError, match="5MB"):
        uploader.upload(_image(size=6 * MB), "audio-covers", AssetKind.COVER)
    assert s3.objects == {}


def test_upload_returns_public_url_and_key_round_trips(s3, uploader):
    url = uploader.upload(_image(name="ma photo  finale.png"), "projects", AssetKind.IMAGE)

    assert url.startswith("https://dev4com-test.s3.eu-west-3.amazonaws.com/projects/")
    assert url.endswith("-ma-photo-finale.png")
    key = AssetUploader.key_from_url(url)
    assert key in s3.objects

    assert AssetUploader.build_key("a b.mp3", "audio", now_ms=42) == "audio/42-a-b.mp3"
    assert AssetUploader.key_from_url("https://b.s3.r.amazonaws.com/audio/1-mon%20son.mp3") == "audio/1-mon son.mp3"


@pytest.mark.parametrize("filename", ["logo#1.png", "a?b.png", "100%41.png", "visuel é.png"])
def test_special_characters_survive_url_and_delete(s3, uploader, filename):
    url = uploader.upload(_image(name=filename), "projects", AssetKind.IMAGE)
    key = AssetUploader.key_from_url(url)
    assert key in s3.objects
    assert key.endswith("-" + filename.replace(" ", "-"))

    assert uploader.delete(url) is True
    assert s3.deleted == [key] and s3.objects == {}


def test_delete_failure_is_logged_not_raised(s3, uploader):
    s3.fail_delete = True
    assert uploader.delete("https://dev4com-test.s3.eu-west-3.amazonaws.com/projects/1-a.png") is False


# ---------------------------------------------------------------------------
# Editor
# ---------------------------------------------------------------------------

def test_project_editor_round_trip(store, uploader, session):
    editor = ProjectEditor(store, uploader, session)
    editor.open_new()
    editor.edit({
        "title": "Refonte",
        "description": "Nouveau site vitrine",
        "client": "ACME",
        "technologies": ["Django", "React"],
        "tags": ["Vitrine"],
        "links": {"app_link": "https://acme.example", "credentials": [{"email": "demo@acme.fr", "password": "x"}]},
        "status": "Completed",
    })
    record_id = editor.save()

    assert editor.state == EditorState.CLOSED
    stored = store.get("projects", record_id)
    assert stored == editor.saved
    assert store.list("projects") == [editor.saved]
    assert stored.links.credentials[0].email == "demo@acme.fr"


@pytest.mark.parametrize("changes", [{"title": "", "description": "x"}, {"title": "x", "description": "  "}])
def test_project_without_title_or_description_never_hits_the_store(firestore, s3, store, uploader, session, changes):
    editor = ProjectEditor(store, uploader, session)
    editor.open_new()
    editor.edit(changes)

    with pytest.raises(RecordValidationError):
        editor.save({"image": _image()})

    assert firestore.write_calls() == []
    assert s3.objects == {}
    assert editor.state == EditorState.EDITING
    assert editor.error == "Veuillez remplir au moins le titre et la description"


def test_open_existing_works_on_a_deep_copy(store, uploader, session):
    original = Project(id="p1", title="T", description="D", technologies=["Vue"])
    editor = ProjectEditor(store, uploader, session)
    draft = editor.open_existing(original)
    draft.technologies.append("Nuxt")
    draft.links.credentials.append(None)

    editor.cancel()
    assert original.technologies == ["Vue"]
    assert original.links.credentials == []
    assert editor.state == EditorState.CLOSED and editor.draft is None


def test_invalid_status_keeps_editor_open(store, uploader, session):
    editor = ProjectEditor(store, uploader, session)
    editor.open_new()
    with pytest.raises(RecordValidationError, match="Statut invalide"):
        editor.edit({"status": "Draft"})
    assert editor.state == EditorState.EDITING
    assert editor.draft.status == ProjectStatus.IN_PROGRESS


def test_replacing_an_image_schedules_cleanup_of_the_old_one(store, uploader, session):
    old = "https://dev4com-test.s3.eu-west-3.amazonaws.com/projects/1-old.png"
    record_id = store.create("projects", Project(title="T", description="D", image_url=old,
                                                 created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)).to_document())
    cleaned = []

    editor = ProjectEditor(store, uploader, session, cleanup=cleaned.append)
    editor.open_existing(store.get("projects", record_id))
    editor.save({"image": _image()})

    assert cleaned == [old]
    assert store.get("projects", record_id).image_url != old


def test_failed_write_deletes_the_fresh_upload(firestore, s3, store, uploader, session):
    firestore.fail_when = lambda op, coll, data: op == "add"
    editor = ProjectEditor(store, uploader, session)
    editor.open_new()
    editor.edit({"title": "T", "description": "D"})

    with pytest.raises(StoreError):
        editor.save({"image": _image()})

    assert s3.objects == {}
    assert len(s3.deleted) == 1
    assert editor.state == EditorState.EDITING
    assert editor.draft.image_url == ""
    assert editor.error


def test_unexpected_write_failure_also_rolls_back(monkeypatch, s3, store, uploader, session):
    def broken_create(collection, data):
        raise RuntimeError("jeton expiré")

    monkeypatch.setattr(store, "create", broken_create)
    editor = ProjectEditor(store, uploader, session)
    editor.open_new()
    editor.edit({"title": "T", "description": "D"})

    with pytest.raises(RuntimeError):
        editor.save({"image": _image()})

    assert s3.objects == {} and len(s3.deleted) == 1
    assert editor.state == EditorState.EDITING
    assert editor.error == "jeton expiré"


def test_new_audio_requires_a_file(firestore, store, uploader, session):
    editor = AudioEditor(store, uploader, session)
    draft = editor.open_new()
    assert draft.category == "Musique" and draft.status == AudioStatus.PROCESSING

    editor.edit({"title": "Générique"})
    with pytest.raises(RecordValidationError, match="fichier audio"):
        editor.save()
    assert firestore.write_calls() == []


def test_audio_cover_failure_is_not_fatal_but_file_failure_is(s3, store, uploader, session):
    s3.fail_put = lambda key: key.startswith("audio-covers/")
    editor = AudioEditor(store, uploader, session)
    editor.open_new()
    editor.edit({"title": "Podcast #1", "duration": 754, "category": "Podcast"})
    record_id = editor.save({"file": _audio(), "cover": _image(name="cover.jpg", content_type="image/jpeg")})

    saved = store.get("audio", record_id)
    assert saved.file_url.startswith("https://dev4com-test.s3.eu-west-3.amazonaws.com/audio/")
    assert saved.cover_url == ""
    assert saved.duration == 754

    s3.fail_put = True
    editor.open_new()
    editor.edit({"title": "Autre"})
    with pytest.raises(AssetUploadError, match="upload"):
        editor.save({"file": _audio()})
    assert editor.state == EditorState.EDITING


def test_sign_out_discards_open_draft(store, uploader, session):
    editor = ProjectEditor(store, uploader, session)
    editor.open_new()
    session.sign_out()
    assert editor.state == EditorState.CLOSED
    assert editor.draft is None


def test_editor_requires_a_principal(store, uploader):
    editor = ProjectEditor(store, uploader, SessionContext())
    with pytest.raises(EditorStateError):
        editor.open_new()


def test_delete_survives_asset_cleanup_failure(firestore, s3, store, uploader):
    _put(firestore, "audio", "a1", title="A", status="Published",
         fileUrl="https://dev4com-test.s3.eu-west-3.amazonaws.com/audio/1-a.mp3",
         coverUrl="https://dev4com-test.s3.eu-west-3.amazonaws.com/audio-covers/1-a.jpg")
    s3.fail_delete = True

    delete_record(store, store.get("audio", "a1"), uploader.delete)

    assert store.list("audio") == []


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

def test_import_fills_defaults_for_missing_fields(store, session):
    importer = BulkImporter(store, session)
    importer.load_text(json.dumps([{"title": "Site A", "tech": ["Vue"]}, {}]))

    assert importer.step == ImportStep.PREVIEW
    first, second = importer.preview()
    assert first["technologies"] == ["Vue"]

    second.pop("createdAt")
    assert second == {
        "title": "Projet 2",
        "subtitle": "",
        "job": "",
        "description": "",
        "imageUrl": "",
        "imagesUrl": [],
        "technologies": [],
        "icons": [],
        "tags": [],
        "links": {"app_link": "", "repository": "", "maquette": ""},
        "status": "In Progress",
        "client": "",
    }


@pytest.mark.parametrize("text, message", [
    ("", "Veuillez saisir du JSON"),
    ('{"title": "x"}', "tableau de projets"),
    ("[1, 2", "JSON invalide"),
    ('[{"title": "x", "status": "Draft"}]', "Statut invalide"),
])
def test_import_shape_errors_stay_in_select(store, session, text, message):
    importer = BulkImporter(store, session)
    with pytest.raises(ImportFormatError, match=message):
        importer.load_text(text)
    assert importer.step == ImportStep.SELECT
    assert message in importer.error


def test_import_file_must_be_json(store, session):
    importer = BulkImporter(store, session)
    with pytest.raises(ImportFormatError, match="format JSON"):
        importer.load_file(SimpleUploadedFile("projets.csv", b"[]"))
    importer.load_file(SimpleUploadedFile("projets.json", b'[{"title": "A"}]'))
    assert importer.step == ImportStep.PREVIEW
    importer.back()
    assert importer.step == ImportStep.SELECT and importer.records == []


def test_import_isolates_a_failing_item(firestore, store, session):
    firestore.fail_when = lambda op, coll, data: op == "add" and data["title"] == "B"
    refreshed = []
    importer = BulkImporter(store, session, on_refresh=lambda: refreshed.append(True))
    importer.load_text(json.dumps([{"title": "A"}, {"title": "B"}, {"title": "C"}]))

    report = importer.run()

    assert report["successCount"] == 2
    assert report["progress"] == {"current": 3, "total": 3}
    assert len(report["errors"]) == 1 and report["errors"][0].startswith("B: ")
    assert [c for c in firestore.calls if c[0] == "add"] == [("add", "projects")] * 3
    assert sorted(p.title for p in store.list("projects")) == ["A", "C"]

    importer.close()
    assert refreshed == [True]
    assert importer.step == ImportStep.SELECT


def test_import_continues_after_an_unexpected_error(monkeypatch, store, session):
    real_create = store.create
    attempted = []

    def flaky_create(collection, data):
        attempted.append(data["title"])
        if data["title"] == "B":
            raise RuntimeError("boom")
        return real_create(collection, data)

    monkeypatch.setattr(store, "create", flaky_create)
    importer = BulkImporter(store, session)
    importer.load_text(json.dumps([{"title": "A"}, {"title": "B"}, {"title": "C"}]))

    report = importer.run()

    assert attempted == ["A", "B", "C"]
    assert report["step"] == "complete"
    assert report["successCount"] == 2
    assert report["errors"] == ["B: boom"]


def test_imported_items_without_date_are_stamped_now(store, session):
    importer = BulkImporter(store, session)
    before = datetime.now(timezone.utc)
    (project,) = importer.load_text(json.dumps([{"title": "A"}]))
    assert project.created_at >= before


def test_template_is_importable():
    projects = parse_projects(json.loads(render_template().decode("utf-8")))
    assert [p.title for p in projects] == ["Projet E-commerce", "Application Mobile", "Site Vitrine"]
    assert projects[0].links.swagger_yaml


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def test_export_turns_native_timestamps_into_iso_strings(firestore, store, session):
    created = DatetimeWithNanoseconds(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone.utc)
    _put(firestore, "projects", "p1", title="T", createdAt=created,
         links={"app_link": "", "history": [{"checkedAt": created}]})

    clock = lambda: datetime(2025, 2, 3, 8, 0, tzinfo=timezone.utc)
    doc = Exporter(store, session, clock=clock).build("projects")

    assert doc.filename == "dev4com-export-projects-2025-02-03.json"
    assert doc.count == 1
    payload = json.loads(doc.render().decode("utf-8"))
    assert payload["exportedBy"] == "admin@dev4com.test"
    assert payload["collection"] == "projects"
    record = payload["data"][0]
    assert datetime.fromisoformat(record["createdAt"]) == created


def test_export_filename_uses_the_local_date(store, session):
    # 23h30 UTC le 3 février = 00h30 le 4 à Paris
    clock = lambda: datetime(2025, 2, 3, 23, 30, tzinfo=timezone.utc)
    doc = Exporter(store, session, clock=clock).build("audio")
    assert doc.filename == "dev4com-export-audio-2025-02-04.json"
    assert datetime.fromisoformat(record["links"]["history"][0]["checkedAt"]) == created


def test_export_all_nests_every_collection(firestore, store, session):
    _put(firestore, "projects", "p1", title="P")
    _put(firestore, "audio", "a1", title="A")
    _put(firestore, "audio", "a2", title="B")

    doc = Exporter(store, session).build("all")

    assert doc.filename.startswith("dev4com-export-all-")
    assert doc.count == 3
    assert set(doc.payload["collections"]) == {"projects", "audio"}
    assert "exportedAt" in doc.payload


def test_export_unknown_target(store, session):
    with pytest.raises(RecordValidationError):
        Exporter(store, session).build("users")


# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------

def test_maintenance_flag_defaults_to_disabled(firestore, store, session):
    assert get_flag(store, "maintenance") == {"enabled": False}

    firestore.fail_when = lambda op, coll, data: op == "get"
    assert get_flag(store, "audioMaintenance")["enabled"] is False

    firestore.fail_when = None
    doc = set_flag(store, "audioMaintenance", True, session)
    assert doc["updatedBy"] == "admin@dev4com.test"
    assert get_flag(store, "audioMaintenance")["enabled"] is True

    with pytest.raises(RecordValidationError):
        get_flag(store, "theme")


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

@pytest.mark.django_db
def test_api_create_list_update_delete_project(admin_client, content_services, s3):
    url = reverse("content_projects")
    r = admin_client.post(url, {"title": "Site", "description": "Vitrine", "tags": ["Web"]}, format="json")
    assert r.status_code == 201
    project_id = r.json()["id"]
    assert r.json()["status"] == "In Progress"

    r = admin_client.post(
        url,
        {"data": json.dumps({"title": "Boutique", "description": "E-commerce", "client": "ACME"}),
         "image": _image()},
        format="multipart",
    )
    assert r.status_code == 201
    first_image = r.json()["imageUrl"]
    shop_id = r.json()["id"]
    assert first_image.startswith("https://dev4com-test.s3.eu-west-3.amazonaws.com/projects/")

    r = admin_client.get(url, {"search": "acme"})
    assert [p["id"] for p in r.json()] == [shop_id]

    detail = reverse("content_project_detail", args=[shop_id])
    r = admin_client.put(detail, {"data": json.dumps({"status": "Archived"}), "image": _image()},
                         format="multipart")
    assert r.status_code == 200
    assert r.json()["status"] == "Archived"
    assert AssetUploader.key_from_url(first_image) in s3.deleted

    r = admin_client.get(url, {"status": "Archived"})
    assert [p["id"] for p in r.json()] == [shop_id]

    r = admin_client.delete(reverse("content_project_detail", args=[project_id]))
    assert r.status_code == 204
    assert [p["id"] for p in admin_client.get(url).json()] == [shop_id]


@pytest.mark.django_db
def test_api_validation_and_upstream_errors(admin_client, content_services, firestore):
    url = reverse("content_projects")
    r = admin_client.post(url, {"title": "Sans description"}, format="json")
    assert r.status_code == 400
    assert r.json() == {"error": "Veuillez remplir au moins le titre et la description"}

    r = admin_client.put(reverse("content_project_detail", args=["absent"]), {"title": "x"}, format="json")
    assert r.status_code == 404

    firestore.fail_when = lambda op, coll, data: True
    r = admin_client.get(url)
    assert r.status_code == 502
    assert r.json() == {"error": "Erreur lors du chargement des projets"}


@pytest.mark.django_db
def test_api_delete_with_failing_storage_still_removes_record(admin_client, content_services, firestore, s3):
    _put(firestore, "projects", "p1", title="T", description="D",
         imageUrl="https://dev4com-test.s3.eu-west-3.amazonaws.com/projects/1-a.png")
    s3.fail_delete = True

    r = admin_client.delete(reverse("content_project_detail", args=["p1"]))

    assert r.status_code == 204
    assert admin_client.get(reverse("content_projects")).json() == []


@pytest.mark.django_db
def test_api_audio_create_and_public_listing(admin_client, content_services):
    r = admin_client.post(
        reverse("content_audio"),
        {"data": json.dumps({"title": "Jingle radio", "status": "Published", "duration": 12}), "file": _audio()},
        format="multipart",
    )
    assert r.status_code == 201
    assert r.json()["category"] == "Musique"

    r = admin_client.post(reverse("content_audio"), {"title": "Brouillon"}, format="json")
    assert r.status_code == 400

    public = admin_client.get(reverse("public_audio")).json()
    assert [a["title"] for a in public] == ["Jingle radio"]


@pytest.mark.django_db
def test_api_import_preview_and_run(admin_client, content_services):
    items = json.dumps([{"title": "A"}, {"description": "sans titre"}])

    r = admin_client.post(reverse("content_import_preview"), {"json": items}, format="json")
    assert r.status_code == 200
    assert [p["title"] for p in r.json()["projects"]] == ["A", "Projet 2"]

    r = admin_client.post(reverse("content_import_preview"), {"json": "{}"}, format="json")
    assert r.status_code == 400
    assert "tableau" in r.json()["error"]

    r = admin_client.post(reverse("content_import_preview"), [{"title": "A"}], format="json")
    assert r.status_code == 400
    assert "champ 'json'" in r.json()["error"]

    upload = SimpleUploadedFile("projets.json", items.encode("utf-8"), content_type="application/json")
    r = admin_client.post(reverse("content_import"), {"file": upload}, format="multipart")
    assert r.status_code == 200
    body = r.json()
    assert body["successCount"] == 2 and body["errors"] == []
    assert len(body["projects"]) == 2


@pytest.mark.django_db
def test_api_downloads(admin_client, content_services, firestore):
    _put(firestore, "projects", "p1", title="T", createdAt=datetime(2024, 1, 1, tzinfo=timezone.utc))

    r = admin_client.get(reverse("content_import_template"))
    assert r.status_code == 200
    assert 'filename="template-projets-import.json"' in r["Content-Disposition"]

    r = admin_client.get(reverse("content_export", args=["projects"]))
    assert r.status_code == 200
    assert r["X-Export-Count"] == "1"
    assert "dev4com-export-projects-" in r["Content-Disposition"]
    payload = json.loads(r.content.decode("utf-8"))
    assert payload["data"][0]["createdAt"].startswith("2024-01-01T00:00:00")

    assert admin_client.get(reverse("content_export", args=["nope"])).status_code == 400


@pytest.mark.django_db
def test_api_maintenance_flags(admin_client, content_services, client):
    r = admin_client.put(reverse("content_setting", args=["maintenance"]), {"enabled": True}, format="json")
    assert r.status_code == 200
    assert r.json()["updatedBy"] == "admin@dev4com.test"

    r = client.get(reverse("public_setting", args=["maintenance"]))
    assert r.status_code == 200 and r.json()["enabled"] is True
    assert client.get(reverse("public_setting", args=["audioMaintenance"])).json() == {"enabled": False}


# ---------------------------------------------------------------------------
# Commandes
# ---------------------------------------------------------------------------

def test_import_and_export_commands(content_services, firestore, store, tmp_path):
    source = tmp_path / "projets.json"
    source.write_text(json.dumps([{"title": "A"}, {"title": "B", "status": "Completed"}]), encoding="utf-8")
    out = StringIO()

    call_command("import_projects", str(source), "--dry-run", stdout=out)
    assert "2 projet(s) seraient importés" in out.getvalue()
    assert firestore.write_calls() == []

    call_command("import_projects", str(source), stdout=out)
    assert sorted(p.title for p in store.list("projects")) == ["A", "B"]

    target = tmp_path / "export.json"
    call_command("export_content", "projects", "--output", str(target), "--by", "cli@dev4com.test", stdout=out)
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["exportedBy"] == "cli@dev4com.test"
    assert len(payload["data"]) == 2

    with pytest.raises(CommandError):
        call_command("import_projects", str(tmp_path / "absent.json"))
