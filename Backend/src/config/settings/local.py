from .base import *  # noqa

# --- Charger .env (Backend/.env) et ÉCRASER les variables OS si besoin -----
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

try:
    from dotenv import load_dotenv
    ENV_DIR = Path(__file__).resolve().parents[3]  # -> dossier Backend/ (depuis src/config/settings/local.py)
    env_path = ENV_DIR / ".env"
    # override=True pour écraser une variable déjà définie dans la session
    if env_path.exists():
        load_dotenv(env_path, override=True)
        logger.info(f"[settings] .env chargé depuis {env_path}")
except ImportError as e:
    # pas bloquant si python-dotenv n'est pas installé
    logger.warning(f"[settings] Impossible de charger .env: {e}")

# --- Dev local ---
DEBUG = True
ALLOWED_HOSTS = ["127.0.0.1", "localhost", "host.docker.internal"]

# Front Next.js en dev
CSRF_TRUSTED_ORIGINS = [
    "http://127.0.0.1:3000",
    "http://localhost:3000",
]

# CORS en dev
CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOW_CREDENTIALS = True

REST_FRAMEWORK.update({
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ),
})

# Emails affichés dans la console si aucun SMTP n'est configuré
if not os.getenv("SMTP_HOST"):
    EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# Re-lire les valeurs issues du .env (utilisées par le code applicatif)
FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
AWS_REGION = os.getenv("AWS_REGION", "")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID", "")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY", "")
AWS_S3_BUCKET = os.getenv("AWS_S3_BUCKET", "")
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "gemini")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", CONTACT_EMAIL)
CELERY_TASK_ALWAYS_EAGER = os.getenv("CELERY_TASK_ALWAYS_EAGER", "1") == "1"
EMAIL_HOST = os.getenv("SMTP_HOST", EMAIL_HOST)
EMAIL_PORT = int(os.getenv("SMTP_PORT") or EMAIL_PORT)
EMAIL_HOST_USER = os.getenv("SMTP_USER", EMAIL_HOST_USER)
EMAIL_HOST_PASSWORD = os.getenv("SMTP_PASS", EMAIL_HOST_PASSWORD)
