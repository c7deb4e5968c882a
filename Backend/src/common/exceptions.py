import logging
from typing import Optional

from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import APIException

logger = logging.getLogger(__name__)


class UserFacingAPIException(APIException):
    """
    Exception controlable et propre pour retourner un message a l'utilisateur.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Une erreur est survenue."
    default_code = "error"


class UpstreamServiceError(UserFacingAPIException):
    """Service externe (Firestore, S3, LLM, SMTP) injoignable ou en erreur."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Service externe indisponible."
    default_code = "upstream_error"


def custom_exception_handler(exc, context) -> Optional[Response]:
    """
    Enveloppe les erreurs DRF dans un format stable:
        {"error": {"code": ..., "detail": ..., "status": ...}}
    Active via REST_FRAMEWORK['EXCEPTION_HANDLER'] dans config/settings/base.py.
    """
    response = exception_handler(exc, context)

    if response is not None:
        response.data = {
            "error": {
                "code": getattr(exc, "default_code", "error"),
                "detail": response.data,
                "status": response.status_code,
            }
        }
        return response

    # Erreur non geree -> 500
    view = context.get("view")
    logger.exception(f"[api] Erreur non geree dans {type(view).__name__ if view else '?'}: {exc}")
    return Response(
        {"error": {"code": "server_error", "detail": "Erreur interne", "status": 500}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
