import pytest
from django.urls import reverse
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

User = get_user_model()


@pytest.mark.django_db
def test_register_and_login_and_me(settings):
    settings.ALLOW_REGISTRATION = True
    client = APIClient()

    # 1) Register
    r = client.post(
        reverse("register"),
        {
            "username": "alice",
            "email": "alice@dev4com.test",
            "password": "StrongPassw0rd!",
            "display_name": "Alice",
        },
        format="json",
    )
    assert r.status_code == 201, r.content

    # 2) Login (JWT)
    r = client.post(
        reverse("token_obtain_pair"),
        {"username": "alice", "password": "StrongPassw0rd!"},
        format="json",
    )
    assert r.status_code == 200, r.content
    assert "access" in r.data
    token = r.data["access"]

    # 3) /me
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    r = client.get(reverse("me"))
    assert r.status_code == 200
    assert r.data["username"] == "alice"
    assert r.data["display_name"] == "Alice"

    # 4) Change password
    r = client.post(
        reverse("change_password"),
        {"old_password": "StrongPassw0rd!", "new_password": "An0therStrongPass!"},
        format="json",
    )
    assert r.status_code == 200


@pytest.mark.django_db
def test_register_closed_by_default(settings):
    settings.ALLOW_REGISTRATION = False
    client = APIClient()
    r = client.post(
        reverse("register"),
        {"username": "bob", "email": "bob@dev4com.test", "password": "StrongPassw0rd!"},
        format="json",
    )
    assert r.status_code == 403
    assert not User.objects.filter(username="bob").exists()


@pytest.mark.django_db
def test_register_rejects_duplicate_email(settings):
    settings.ALLOW_REGISTRATION = True
    User.objects.create_user("carol", "carol@dev4com.test", "StrongPassw0rd!")
    client = APIClient()
    r = client.post(
        reverse("register"),
        {"username": "carol2", "email": "carol@dev4com.test", "password": "StrongPassw0rd!"},
        format="json",
    )
    assert r.status_code == 400
    assert "email" in r.json()["error"]["detail"]
