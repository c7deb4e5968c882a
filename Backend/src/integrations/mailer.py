"""
E-mails du site (prospect capturé par le chat, formulaire de contact).

Chaque envoi est indépendant: l'échec de l'un est journalisé et n'empêche pas l'autre.
"""

from __future__ import annotations
import re, logging
from typing import Dict, Optional

from django.conf import settings
from django.core.mail import EmailMessage

__all__ = ["is_valid_email", "send_lead_emails", "send_contact_emails"]

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def is_configured() -> bool:
    return bool(getattr(settings, "EMAIL_HOST_USER", "") and getattr(settings, "CONTACT_EMAIL", ""))


def _send(label: str, message: EmailMessage) -> bool:
    try:
        message.send(fail_silently=False)
    except OSError as e:  # smtplib.SMTPException inclus
        logger.error(f"[mail] Envoi '{label}' à {', '.join(message.to)} échoué: {e}")
        return False
    logger.info(f"[mail] '{label}' envoyé à {', '.join(message.to)}")
    return True


def send_lead_emails(email: str, summary: str = "") -> Dict[str, bool]:
    """Confirmation au prospect + notification interne."""
    confirmation = EmailMessage(
        subject="Merci pour votre intérêt - DEV4COM",
        body=(
            "Bonjour,\n\n"
            "Merci pour votre intérêt pour DEV4COM ! Notre équipe revient vers vous sous 24h "
            "avec notre portfolio et une proposition personnalisée.\n\n"
            "Au programme: maquette gratuite et un an de maintenance offert.\n\n"
            "L'équipe DEV4COM"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[email],
    )
    notification = EmailMessage(
        subject=f"Nouveau lead: {email}",
        body=(
            f"Un visiteur a laissé son adresse via le chat.\n\nE-mail: {email}\n\n"
            f"Résumé de la conversation:\n{summary or '(aucun)'}"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[settings.CONTACT_EMAIL],
        reply_to=[email],
    )
    return {
        "client": _send("confirmation prospect", confirmation),
        "internal": _send("notification lead", notification),
    }


def send_contact_emails(name: str, email: str, subject: str, message: str,
                        phone: Optional[str] = None) -> Dict[str, bool]:
    """Message du formulaire de contact: notification interne (réponse au visiteur) + accusé de réception."""
    lines = [f"Nom: {name}", f"E-mail: {email}"]
    if phone:
        lines.append(f"Téléphone: {phone}")
    notification = EmailMessage(
        subject=f"Nouveau message de {name}: {subject}",
        body="\n".join(lines) + f"\n\n{message}\n\n-- Formulaire de contact DEV4COM",
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[settings.CONTACT_EMAIL],
        reply_to=[email],
    )
    receipt = EmailMessage(
        subject="Nous avons bien reçu votre message - DEV4COM",
        body=(
            f"Bonjour {name},\n\nMerci pour votre message « {subject} ». "
            "Nous vous répondons dans les plus brefs délais.\n\nL'équipe DEV4COM"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[email],
    )
    return {
        "internal": _send("contact", notification),
        "client": _send("accusé de réception", receipt),
    }
