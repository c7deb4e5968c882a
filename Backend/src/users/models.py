from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Compte de l'espace d'administration (gestion des projets et de l'audio).

    - Hérite d'AbstractUser (username, email, first_name, last_name, is_staff, etc.)
    - display_name: nom affiché dans l'admin et dans les exports ("exportedBy" reste l'email)
    """

    display_name = models.CharField(max_length=150, blank=True, default="")

    def __str__(self) -> str:
        # Affiche le nom d'affichage, sinon le username, sinon l'email
        return self.display_name or self.username or self.email

    class Meta:
        verbose_name = "Utilisateur"
        verbose_name_plural = "Utilisateurs"
        ordering = ["id"]
