import smtplib
from types import SimpleNamespace

import httpx
import pytest
import requests
from django.core.mail import EmailMessage
from django.urls import reverse
from openai import RateLimitError
from rest_framework.test import APIClient

from integrations import llm
from integrations.llm import LLMError, generate_reply, parse_reply, summarize_history
from integrations.mailer import is_valid_email


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


def _gemini_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def gemini(settings, monkeypatch):
    """Gemini configuré; ``gemini.reply`` fixe la réponse HTTP, ``gemini.calls`` les requêtes."""
    settings.LLM_PROVIDER = "gemini"
    settings.GEMINI_API_KEY = "test-key"
    state = SimpleNamespace(reply=FakeResponse(payload=_gemini_payload("Bonjour !")), calls=[])

    def fake_post(url, json=None, timeout=None, headers=None):
        state.calls.append({"url": url, "json": json, "headers": headers})
        if isinstance(state.reply, Exception):
            raise state.reply
        return state.reply

    monkeypatch.setattr(llm.requests, "post", fake_post)
    return state


# ---------------------------------------------------------------------------
# Découpage des réponses
# ---------------------------------------------------------------------------

def test_parse_reply_extracts_message_suggestions_and_email():
    reply = parse_reply(
        "EMAIL_CAPTURED:jean@exemple.fr Merci ! Vous recevrez un email sous peu.\n"
        "---SUGGESTIONS---\nPoser une question|||Voir vos projets|||Services"
    )
    assert reply.message == "Merci ! Vous recevrez un email sous peu."
    assert reply.suggestions == ["Poser une question", "Voir vos projets", "Services"]
    assert reply.captured_email == "jean@exemple.fr"


def test_parse_reply_always_returns_three_suggestions():
    assert parse_reply("Salut").suggestions == llm.DEFAULT_SUGGESTIONS
    assert parse_reply("Salut\n---SUGGESTIONS---\nUne seule").suggestions == [
        "Une seule", "Discuter de mon projet", "Poser une autre question",
    ]
    assert len(parse_reply("x\n---SUGGESTIONS---\na|||b|||c|||d").suggestions) == 3

    empty = parse_reply("   ")
    assert empty.message.startswith("Je peux vous aider")
    assert empty.suggestions == ["Créer un site web", "Créer une boutique en ligne", "Améliorer mon SEO"]
    assert empty.captured_email is None


def test_summarize_history_keeps_last_six_turns():
    history = [{"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"} for i in range(8)]
    lines = summarize_history(history).splitlines()
    assert lines == ["Client: m2", "Assistant: m3", "Client: m4", "Assistant: m5", "Client: m6", "Assistant: m7"]


@pytest.mark.parametrize("value, ok", [
    ("jean@exemple.fr", True),
    ("a@b.co", True),
    ("sans-arobase.fr", False),
    ("jean@exemple", False),
    ("jean dupont@exemple.fr", False),
    (None, False),
])
def test_is_valid_email(value, ok):
    assert is_valid_email(value) is ok


# ---------------------------------------------------------------------------
# Fournisseurs
# ---------------------------------------------------------------------------

def test_gemini_prompt_includes_history(gemini):
    generate_reply("Je veux un site", [{"role": "user", "content": "Bonjour"}])
    call = gemini.calls[0]
    prompt = call["json"]["contents"][0]["parts"][0]["text"]
    assert "Visiteur: Bonjour" in prompt
    assert prompt.endswith("Visiteur: Je veux un site\nAssistant:")
    assert call["headers"]["x-goog-api-key"] == "test-key"


@pytest.mark.parametrize("status_code, message", [
    (400, "Requête invalide"),
    (403, "Clé API Gemini invalide"),
    (429, "Limite de requêtes atteinte"),
    (503, "Service Gemini temporairement indisponible"),
])
def test_gemini_http_errors_are_translated(gemini, status_code, message):
    gemini.reply = FakeResponse(status_code=status_code, text="error")
    with pytest.raises(LLMError, match=message):
        generate_reply("Bonjour")


def test_missing_api_key(settings):
    settings.LLM_PROVIDER = "gemini"
    settings.GEMINI_API_KEY = ""
    with pytest.raises(LLMError, match="GEMINI_API_KEY"):
        generate_reply("Bonjour")


def test_openai_provider(settings, monkeypatch):
    settings.LLM_PROVIDER = "openai"
    settings.OPENAI_API_KEY = "sk-test"
    seen = {}

    class FakeCompletions:
        def create(self, **kwargs):
            seen.update(kwargs)
            content = "Parfait !\n---SUGGESTIONS---\nA|||B|||C"
            return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    class FakeOpenAI:
        def __init__(self, api_key, timeout):
            self.chat = SimpleNamespace(completions=FakeCompletions())

    monkeypatch.setattr(llm, "OpenAI", FakeOpenAI)
    reply = generate_reply("Un site", [{"role": "assistant", "content": "Bonjour"}])

    assert reply.message == "Parfait !"
    assert [m["role"] for m in seen["messages"]] == ["system", "assistant", "user"]


def test_openai_rate_limit_is_translated(settings, monkeypatch):
    settings.LLM_PROVIDER = "openai"
    settings.OPENAI_API_KEY = "sk-test"
    response = httpx.Response(429, request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))

    class FakeCompletions:
        def create(self, **kwargs):
            raise RateLimitError("quota", response=response, body=None)

    class FakeOpenAI:
        def __init__(self, api_key, timeout):
            self.chat = SimpleNamespace(completions=FakeCompletions())

    monkeypatch.setattr(llm, "OpenAI", FakeOpenAI)
    with pytest.raises(LLMError, match="Limite de requêtes"):
        generate_reply("Bonjour")


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

@pytest.mark.django_db
@pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": 42}, ["hi"]])
def test_chat_requires_a_message(body):
    r = APIClient().post(reverse("chat"), body, format="json")
    assert r.status_code == 400
    assert r.json() == {"error": "Message is required and must be a string"}


@pytest.mark.django_db
def test_chat_reply_and_lead_capture(gemini, mailoutbox):
    gemini.reply = FakeResponse(payload=_gemini_payload(
        "EMAIL_CAPTURED:lea@client.fr Merci ! Notre équipe vous contacte sous 24h.\n"
        "---SUGGESTIONS---\nVoir vos projets|||Poser une question|||Services"
    ))
    history = [{"role": "user", "content": "Je veux une boutique"}, {"role": "assistant", "content": "Votre email ?"}]

    r = APIClient().post(
        reverse("chat"), {"message": "lea@client.fr", "conversationHistory": history}, format="json"
    )

    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Merci ! Notre équipe vous contacte sous 24h."
    assert body["capturedEmail"] == "lea@client.fr"
    assert len(body["suggestions"]) == 3

    assert sorted(m.to[0] for m in mailoutbox) == ["contact@dev4com.test", "lea@client.fr"]
    internal = next(m for m in mailoutbox if m.to == ["contact@dev4com.test"])
    assert "Client: Je veux une boutique" in internal.body


@pytest.mark.django_db
def test_chat_upstream_failure_is_500(gemini, mailoutbox):
    gemini.reply = requests.ConnectionError("down")
    r = APIClient().post(reverse("chat"), {"message": "Bonjour"}, format="json")
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to process message"
    assert "indisponible" in r.json()["details"]
    assert mailoutbox == []


@pytest.mark.django_db
def test_lead_email_validation():
    client = APIClient()
    r = client.post(reverse("send_lead_email"), {}, format="json")
    assert r.status_code == 400 and r.json() == {"error": "Email is required"}
    r = client.post(reverse("send_lead_email"), {"email": "pas-un-email"}, format="json")
    assert r.status_code == 400 and r.json() == {"error": "Invalid email format"}
    r = client.post(reverse("send_lead_email"), ["lea@client.fr"], format="json")
    assert r.status_code == 400 and r.json() == {"error": "Email is required"}


@pytest.mark.django_db
def test_lead_email_sends_two_independent_mails(monkeypatch, mailoutbox):
    original_send = EmailMessage.send

    def flaky_send(self, fail_silently=False):
        if self.to == ["contact@dev4com.test"]:
            raise smtplib.SMTPServerDisconnected("connexion perdue")
        return original_send(self, fail_silently=fail_silently)

    monkeypatch.setattr(EmailMessage, "send", flaky_send)
    r = APIClient().post(
        reverse("send_lead_email"),
        {"email": "lea@client.fr", "conversationSummary": "Client: bonjour"},
        format="json",
    )

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["email"] == "lea@client.fr"
    assert body["timestamp"]
    assert body["delivered"] == {"client": True, "internal": False}
    assert [m.to for m in mailoutbox] == [["lea@client.fr"]]


@pytest.mark.django_db
def test_contact_form(mailoutbox):
    client = APIClient()
    payload = {"name": "Léa", "email": "lea@client.fr", "subject": "Devis", "message": "Un site vitrine."}

    r = client.post(reverse("contact"), payload, format="json")
    assert r.status_code == 200
    internal = next(m for m in mailoutbox if m.to == ["contact@dev4com.test"])
    assert internal.reply_to == ["lea@client.fr"]
    assert "Un site vitrine." in internal.body
    assert len(mailoutbox) == 2

    r = client.post(reverse("contact"), {**payload, "email": "faux"}, format="json")
    assert r.status_code == 400
    assert "email" in r.json()["error"]["detail"]


@pytest.mark.django_db
def test_integrations_health(settings):
    settings.AWS_S3_BUCKET = "bucket"
    settings.AWS_REGION = "eu-west-3"
    r = APIClient().get(reverse("integrations_health"))
    assert r.status_code == 200
    assert set(r.json()) == {"firestore", "s3", "llm", "smtp"}
    assert r.json()["s3"] is True
