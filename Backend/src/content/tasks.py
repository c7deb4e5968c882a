"""
Tâches Celery du contenu: nettoyage des fichiers remplacés ou orphelins.
"""
import logging

from celery import shared_task
from kombu.exceptions import OperationalError

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def delete_asset(url: str) -> bool:
    from . import services

    return services.get_uploader().delete(url)


def schedule_asset_deletion(url: str) -> None:
    """Planifie la suppression de ``url``; sans broker joignable, elle est faite tout de suite."""
    if not url:
        return
    try:
        delete_asset.delay(url)
    except OperationalError as e:
        logger.warning(f"[tasks] Broker indisponible ({e}), suppression de {url} en direct")
        delete_asset(url)
