"""
Erreurs du gestionnaire de contenu.

Deux familles:
- validation (détectée avant tout appel réseau): message précis, affiché tel quel;
- amont (Firestore, S3): message générique, le détail part dans les logs.
"""


class ContentError(RuntimeError):
    """Base des erreurs du contenu."""

    upstream = False


class RecordValidationError(ContentError):
    """Champ obligatoire manquant ou valeur hors schéma."""


class AssetValidationError(ContentError):
    """Fichier trop volumineux ou de mauvais type (aucun upload tenté)."""


class ImportFormatError(ContentError):
    """JSON illisible ou qui n'est pas un tableau d'objets."""


class EditorStateError(ContentError):
    """Transition interdite dans l'éditeur ou l'import."""


class StoreError(ContentError):
    """Lecture ou écriture Firestore en échec."""

    upstream = True


class AssetUploadError(ContentError):
    """Upload S3 en échec."""

    upstream = True
