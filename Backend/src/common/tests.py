import pytest
from django.urls import reverse
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_health_and_ping():
    client = APIClient()

    r = client.get(reverse("health"))
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = client.get(reverse("ping"))
    assert r.status_code == 200
    assert r.json()["pong"] is True


@pytest.mark.django_db
def test_request_id_is_echoed_or_generated():
    client = APIClient()

    r = client.get(reverse("ping"), HTTP_X_REQUEST_ID="abc-123")
    assert r["X-Request-ID"] == "abc-123"
    assert r.json()["request_id"] == "abc-123"

    r = client.get(reverse("ping"))
    assert len(r["X-Request-ID"]) == 36


@pytest.mark.django_db
def test_unauthenticated_admin_call_is_wrapped_by_exception_handler():
    client = APIClient()
    r = client.get(reverse("content_projects"))
    assert r.status_code == 401
    assert r.json()["error"]["status"] == 401
