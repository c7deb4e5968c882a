"""
Contexte de session explicite: le principal courant et ses abonnés.

Les composants (éditeurs, import, export) reçoivent le contexte en paramètre et s'y
abonnent pendant leur durée de vie; aucun état global.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[Optional["Principal"]], None]


@dataclass(frozen=True)
class Principal:
    uid: str
    email: str = ""
    display_name: str = ""

    @property
    def label(self) -> str:
        return self.email or self.display_name or self.uid


class SessionContext:
    def __init__(self, principal: Optional[Principal] = None):
        self._principal = principal
        self._listeners: List[Listener] = []

    @classmethod
    def from_request(cls, request) -> "SessionContext":
        user = getattr(request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return cls()
        return cls(
            Principal(
                uid=str(user.pk),
                email=getattr(user, "email", "") or "",
                display_name=getattr(user, "display_name", "") or user.get_username(),
            )
        )

    @property
    def principal(self) -> Optional[Principal]:
        return self._principal

    @property
    def is_authenticated(self) -> bool:
        return self._principal is not None

    @property
    def email(self) -> str:
        return self._principal.email if self._principal else ""

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Enregistre ``listener``; renvoie la fonction de désabonnement."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def sign_in(self, principal: Principal) -> None:
        self._principal = principal
        self._notify()

    def sign_out(self) -> None:
        if self._principal is not None:
            logger.info(f"[session] Déconnexion de {self._principal.label}")
        self._principal = None
        self._notify()

    def _notify(self) -> None:
        # copie: un abonné peut se désabonner pendant la notification
        for listener in list(self._listeners):
            listener(self._principal)
