from .base import *

# Tests
DEBUG = True

# DB sqlite en mémoire par défaut pour rapidité
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Auth plus légère en test
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Email capturé en mémoire
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
DEFAULT_FROM_EMAIL = "noreply@dev4com.test"
CONTACT_EMAIL = "contact@dev4com.test"

# DRF: JWT seulement (les tests forcent l'authentification via APIClient)
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "rest_framework_simplejwt.authentication.JWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
    "EXCEPTION_HANDLER": "common.exceptions.custom_exception_handler",
}

# Services externes: valeurs factices, les clients sont remplacés par des fakes
AWS_REGION = "eu-west-3"
AWS_S3_BUCKET = "dev4com-test"
GEMINI_API_KEY = ""
OPENAI_API_KEY = ""

# Celery: exécution synchrone
CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = "memory://"
