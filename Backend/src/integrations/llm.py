"""
Assistant du chat: appel au LLM (Gemini en REST ou OpenAI) et découpage de la réponse.

Le modèle répond au format:
    Réponse courte
    ---SUGGESTIONS---
    Suggestion 1|||Suggestion 2|||Suggestion 3
et préfixe sa réponse par ``EMAIL_CAPTURED:<email>`` quand le visiteur a donné son adresse.
"""

from __future__ import annotations
import os, re, logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import requests
from requests.exceptions import RequestException
from django.conf import settings
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    OpenAI,
    RateLimitError,
)

__all__ = ["is_configured", "generate_reply", "parse_reply", "ChatReply", "LLMError"]

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# 🔧 Configuration
# ---------------------------------------------------------------------------
_GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

SUGGESTIONS_MARKER = "---SUGGESTIONS---"
SUGGESTIONS_SEPARATOR = "|||"
_EMAIL_TAG = re.compile(r"EMAIL_CAPTURED:\s*(\S+@\S+)\s*")

DEFAULT_SUGGESTIONS = [
    "Recevoir des infos par email",
    "Demander un devis gratuit",
    "En savoir plus sur vos services",
]
FILLER_SUGGESTIONS = [
    "Voir vos réalisations",
    "Discuter de mon projet",
    "Poser une autre question",
]
EMPTY_REPLY = (
    "Je peux vous aider avec la création de site web, e-commerce, SEO ou design. Lequel vous intéresse ?\n"
    f"{SUGGESTIONS_MARKER}\n"
    "Créer un site web|||Créer une boutique en ligne|||Améliorer mon SEO"
)

SYSTEM_PROMPT = """Tu es l'assistant commercial de DEV4COM, agence de développement web.
Services: sites web avec maquette gratuite, e-commerce, automatisation IA et CRM, SEO, design,
maintenance gratuite un an. Objectif: obtenir l'adresse e-mail du visiteur en deux ou trois échanges.
Réponds en français, deux phrases maximum, et termine par une question.
Si le visiteur donne une adresse e-mail, commence ta réponse par "EMAIL_CAPTURED:<email>".
Format obligatoire:
Réponse courte
---SUGGESTIONS---
Suggestion 1|||Suggestion 2|||Suggestion 3
"""


def _setting(name: str, default: str = "") -> str:
    return str(getattr(settings, name, None) or os.getenv(name) or default).strip()


def _provider() -> str:
    return _setting("LLM_PROVIDER", "gemini").lower()


def _timeout() -> int:
    return int(_setting("LLM_TIMEOUT_SECONDS", "30"))


# ---------------------------------------------------------------------------
# ⚠️ Exception personnalisée
# ---------------------------------------------------------------------------
class LLMError(RuntimeError):
    """Erreur d'appel au fournisseur LLM (message affichable)."""


def is_configured() -> bool:
    key = "OPENAI_API_KEY" if _provider() == "openai" else "GEMINI_API_KEY"
    return bool(_setting(key))


# ---------------------------------------------------------------------------
# 🧩 Découpage de la réponse
# ---------------------------------------------------------------------------
@dataclass
class ChatReply:
    message: str
    suggestions: List[str] = field(default_factory=list)
    captured_email: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "suggestions": self.suggestions,
            "capturedEmail": self.captured_email,
        }


def parse_reply(text: str) -> ChatReply:
    """Texte brut du modèle -> message, exactement trois suggestions, e-mail capturé éventuel."""
    text = (text or "").strip() or EMPTY_REPLY
    message, _, tail = text.partition(SUGGESTIONS_MARKER)
    message = message.strip()

    captured = None
    match = _EMAIL_TAG.search(message)
    if match:
        captured = match.group(1)
        message = _EMAIL_TAG.sub("", message).strip()

    suggestions = [s.strip() for s in tail.split(SUGGESTIONS_SEPARATOR) if s.strip()]
    if not suggestions:
        suggestions = list(DEFAULT_SUGGESTIONS)
    while len(suggestions) < 3:
        suggestions.append(FILLER_SUGGESTIONS[len(suggestions) % len(FILLER_SUGGESTIONS)])

    return ChatReply(message=message, suggestions=suggestions[:3], captured_email=captured)


# ---------------------------------------------------------------------------
# 🚀 Fournisseurs
# ---------------------------------------------------------------------------
def _role_label(role: str) -> str:
    return "Visiteur" if role == "user" else "Assistant"


def _build_prompt(message: str, history: Sequence[Dict[str, str]]) -> str:
    prompt = SYSTEM_PROMPT + "\n"
    if history:
        prompt += "Historique de la conversation:\n"
        for turn in history:
            prompt += f"{_role_label(turn.get('role', ''))}: {turn.get('content', '')}\n"
        prompt += "\n"
    return prompt + f"Visiteur: {message}\nAssistant:"


def _status_error(provider: str, status: Optional[int], detail: str) -> LLMError:
    if status in (401, 403) or "API_KEY_INVALID" in detail or "API key" in detail:
        return LLMError(f"Clé API {provider} invalide - Veuillez vérifier votre configuration")
    if status == 400:
        return LLMError("Requête invalide - Veuillez réessayer")
    if status == 429:
        return LLMError("Limite de requêtes atteinte - Veuillez patienter un instant")
    if status in (500, 502, 503, 504):
        return LLMError(f"Service {provider} temporairement indisponible")
    return LLMError(f"Erreur {provider}: {detail or 'Erreur inconnue'}")


def _gemini_text(message: str, history: Sequence[Dict[str, str]]) -> str:
    key = _setting("GEMINI_API_KEY")
    if not key:
        raise LLMError("Configuration API manquante - Veuillez configurer GEMINI_API_KEY")
    url = _GEMINI_URL.format(model=_setting("GEMINI_MODEL", "gemini-flash-latest"))
    payload = {
        "contents": [{"role": "user", "parts": [{"text": _build_prompt(message, history)}]}],
        "generationConfig": {"temperature": 0.8, "topP": 0.95, "topK": 40, "maxOutputTokens": 250},
    }
    logger.info(f"[chat] POST gemini ({len(history)} tours d'historique)")
    try:
        resp = requests.post(
            url,
            json=payload,
            timeout=_timeout(),
            headers={"Content-Type": "application/json", "x-goog-api-key": key},
        )
    except RequestException as e:
        logger.error(f"[chat] Erreur réseau vers Gemini: {e}")
        raise LLMError("Service Gemini temporairement indisponible") from e

    if resp.status_code >= 400:
        logger.error(f"[chat] Gemini HTTP {resp.status_code}: {resp.text[:300]}")
        raise _status_error("Gemini", resp.status_code, resp.text[:300])

    try:
        data = resp.json()
    except ValueError as e:
        raise LLMError("Réponse Gemini illisible") from e
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts)


def _openai_text(message: str, history: Sequence[Dict[str, str]]) -> str:
    key = _setting("OPENAI_API_KEY")
    if not key:
        raise LLMError("Configuration API manquante - Veuillez configurer OPENAI_API_KEY")
    messages = [{"role": "system", "content": SYSTEM_PROMPT}]
    messages += [
        {"role": "user" if t.get("role") == "user" else "assistant", "content": t.get("content", "")}
        for t in history
    ]
    messages.append({"role": "user", "content": message})

    client = OpenAI(api_key=key, timeout=_timeout())
    logger.info(f"[chat] POST openai ({len(history)} tours d'historique)")
    try:
        completion = client.chat.completions.create(
            model=_setting("OPENAI_MODEL", "gpt-4o-mini"),
            messages=messages,
            max_tokens=250,
            temperature=0.8,
        )
    except AuthenticationError as e:
        raise _status_error("OpenAI", 401, str(e)) from e
    except RateLimitError as e:
        raise _status_error("OpenAI", 429, str(e)) from e
    except (APIConnectionError, APITimeoutError) as e:
        logger.error(f"[chat] Erreur réseau vers OpenAI: {e}")
        raise LLMError("Service OpenAI temporairement indisponible") from e
    except APIStatusError as e:
        logger.error(f"[chat] OpenAI HTTP {e.status_code}: {e}")
        raise _status_error("OpenAI", e.status_code, str(e)) from e

    if not completion.choices:
        return ""
    return completion.choices[0].message.content or ""


_PROVIDERS = {"gemini": _gemini_text, "openai": _openai_text}


def generate_reply(message: str, history: Optional[Sequence[Dict[str, str]]] = None) -> ChatReply:
    provider = _provider()
    call = _PROVIDERS.get(provider)
    if call is None:
        raise LLMError(f"Fournisseur LLM inconnu: {provider}")
    return parse_reply(call(message, list(history or [])))


def summarize_history(history: Sequence[Dict[str, str]], turns: int = 6) -> str:
    """Derniers échanges, pour le mail de prospect."""
    return "\n".join(
        f"{'Client' if t.get('role') == 'user' else 'Assistant'}: {t.get('content', '')}"
        for t in list(history)[-turns:]
    )
