"""
Fixtures partagées: faux clients Firestore et S3 en mémoire, session admin, client API.
"""
import copy
import uuid

import pytest
from botocore.exceptions import ClientError
from django.contrib.auth import get_user_model
from google.api_core.exceptions import ServiceUnavailable
from rest_framework.test import APIClient

from content import services
from content.assets import AssetUploader
from content.session import Principal, SessionContext
from content.store import RecordStore


# ---------------------------------------------------------------------------
# Firestore
# ---------------------------------------------------------------------------

class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def get(self):
        self._collection.db.check("get", self._collection.name, self.id)
        return FakeSnapshot(self.id, self._collection.docs.get(self.id))

    def set(self, data):
        self._collection.db.check("set", self._collection.name, data)
        self._collection.docs[self.id] = copy.deepcopy(data)

    def delete(self):
        self._collection.db.check("delete", self._collection.name, self.id)
        self._collection.docs.pop(self.id, None)


class FakeCollection:
    def __init__(self, db, name):
        self.db = db
        self.name = name
        self.docs = {}

    def stream(self):
        self.db.check("stream", self.name, None)
        return [FakeSnapshot(doc_id, data) for doc_id, data in self.docs.items()]

    def add(self, data):
        self.db.check("add", self.name, data)
        ref = FakeDocumentRef(self, uuid.uuid4().hex[:20])
        self.docs[ref.id] = copy.deepcopy(data)
        return None, ref

    def document(self, doc_id):
        return FakeDocumentRef(self, doc_id)


class FakeFirestore:
    """
    ``fail_when(op, collection, payload) -> bool`` simule une panne
    (ServiceUnavailable) sur les appels choisis.
    """

    def __init__(self):
        self.collections = {}
        self.calls = []
        self.fail_when = None

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]

    def check(self, op, collection, payload):
        self.calls.append((op, collection))
        if self.fail_when is not None and self.fail_when(op, collection, payload):
            raise ServiceUnavailable(f"{op} {collection} indisponible")

    def write_calls(self):
        return [c for c in self.calls if c[0] in ("add", "set", "delete")]


# ---------------------------------------------------------------------------
# S3
# ---------------------------------------------------------------------------

class FakeS3:
    """``fail_put``: True, ou prédicat sur la clé, pour faire échouer les uploads."""

    def __init__(self):
        self.objects = {}
        self.fail_put = False
        self.fail_delete = False
        self.deleted = []

    def put_object(self, Bucket, Key, Body, ContentType):
        if self.fail_put is True or (callable(self.fail_put) and self.fail_put(Key)):
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
        self.objects[Key] = (Body, ContentType)

    def delete_object(self, Bucket, Key):
        if self.fail_delete:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "refusé"}}, "DeleteObject")
        self.deleted.append(Key)
        self.objects.pop(Key, None)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def firestore():
    return FakeFirestore()


@pytest.fixture
def s3():
    return FakeS3()


@pytest.fixture
def store(firestore):
    return RecordStore(firestore)


@pytest.fixture
def uploader(s3):
    return AssetUploader(s3, "dev4com-test", "eu-west-3")


@pytest.fixture
def session():
    return SessionContext(Principal(uid="1", email="admin@dev4com.test", display_name="Admin"))


@pytest.fixture
def content_services(monkeypatch, store, uploader):
    """Les vues et tâches utilisent les faux clients."""
    monkeypatch.setattr(services, "get_store", lambda: store)
    monkeypatch.setattr(services, "get_uploader", lambda: uploader)
    return store, uploader


@pytest.fixture
def admin_user(db):
    return get_user_model().objects.create_user(
        username="admin", email="admin@dev4com.test", password="Secret123!", display_name="Admin"
    )


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
