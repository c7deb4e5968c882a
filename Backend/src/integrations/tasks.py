import logging

from celery import shared_task
from kombu.exceptions import OperationalError

from .mailer import send_lead_emails

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def send_lead_emails_task(email: str, summary: str = ""):
    return send_lead_emails(email, summary)


def schedule_lead_emails(email: str, summary: str = "") -> None:
    """Envoi en tâche de fond; sans broker joignable, envoi immédiat."""
    try:
        send_lead_emails_task.delay(email, summary)
    except OperationalError as e:
        logger.warning(f"[tasks] Broker indisponible ({e}), mail de lead envoyé en direct")
        send_lead_emails(email, summary)
