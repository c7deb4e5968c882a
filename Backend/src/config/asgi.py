import os

# Point d entree serveur: settings de prod par defaut, .env charge si present
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

from django.core.asgi import get_asgi_application

os.environ.setdefault(
    "DJANGO_SETTINGS_MODULE",
    os.getenv("DJANGO_SETTINGS_MODULE", "config.settings.prod"),
)

application = get_asgi_application()
