import logging
import time
import uuid
from typing import Callable
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

_MAX_ID_LENGTH = 64


class RequestIDMiddleware:
    """
    Identifiant de requête (X-Request-ID repris du client ou généré) et ligne de log
    par appel d'API: méthode, chemin, statut, durée.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        incoming = (request.headers.get("X-Request-ID") or "").strip()
        request_id = incoming if 0 < len(incoming) <= _MAX_ID_LENGTH else str(uuid.uuid4())
        request.request_id = request_id

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000

        response.headers["X-Request-ID"] = request_id
        if request.path.startswith("/api/"):
            logger.info(
                f"[api] {request.method} {request.path} -> {response.status_code} "
                f"({elapsed_ms:.0f} ms, id={request_id})"
            )
        return response
