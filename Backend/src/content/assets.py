"""
Upload et suppression des fichiers (images, audio, pochettes) sur S3.
"""
from __future__ import annotations

import logging
import re
import time
from enum import Enum
from typing import Any, Optional
from urllib.parse import quote, unquote, urlparse

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from .errors import AssetUploadError, AssetValidationError

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class AssetKind(Enum):
    """(taille max, préfixe MIME, message de type invalide)"""

    IMAGE = (10 * MB, "image/", "Le fichier doit être une image")
    AUDIO = (50 * MB, "audio/", "Le fichier doit être un fichier audio")
    COVER = (5 * MB, "image/", "Le fichier doit être une image")

    @property
    def max_size(self) -> int:
        return self.value[0]

    @property
    def mime_prefix(self) -> str:
        return self.value[1]

    @property
    def type_error(self) -> str:
        return self.value[2]


# Dossiers S3 par type de contenu
PROJECT_IMAGES_FOLDER = "projects"
AUDIO_FOLDER = "audio"
AUDIO_COVERS_FOLDER = "audio-covers"


class AssetUploader:
    def __init__(self, client: Any, bucket: str, region: str):
        self.client = client
        self.bucket = bucket
        self.region = region

    @classmethod
    def from_settings(cls, client: Any = None) -> "AssetUploader":
        from integrations.s3 import get_s3_client

        return cls(
            client=client or get_s3_client(),
            bucket=settings.AWS_S3_BUCKET,
            region=settings.AWS_REGION,
        )

    # -- validation (aucun appel réseau) ------------------------------------

    @staticmethod
    def validate(file: Any, kind: AssetKind) -> None:
        size = getattr(file, "size", None) or 0
        if size > kind.max_size:
            raise AssetValidationError(
                f"Le fichier est trop volumineux. Taille maximale: {kind.max_size // MB}MB"
            )
        content_type = getattr(file, "content_type", None) or ""
        if not content_type.startswith(kind.mime_prefix):
            raise AssetValidationError(kind.type_error)

    # -- clés et URLs -------------------------------------------------------

    @staticmethod
    def build_key(filename: str, folder: str, now_ms: Optional[int] = None) -> str:
        stamp = now_ms if now_ms is not None else int(time.time() * 1000)
        safe_name = re.sub(r"\s+", "-", filename or "fichier")
        return f"{folder}/{stamp}-{safe_name}"

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quote(key)}"

    @staticmethod
    def key_from_url(url: str) -> str:
        return unquote(urlparse(url).path.lstrip("/"))

    # -- opérations ---------------------------------------------------------

    def upload(self, file: Any, folder: str, kind: AssetKind) -> str:
        """Valide puis envoie ``file`` (UploadedFile Django) et renvoie son URL publique."""
        self.validate(file, kind)
        if not self.bucket:
            raise AssetUploadError("Le bucket S3 n'est pas configuré")

        key = self.build_key(getattr(file, "name", ""), folder)
        if hasattr(file, "seek"):
            file.seek(0)
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=file.read(),
                ContentType=file.content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"[s3] Upload de {key} échoué: {e}")
            raise AssetUploadError(f"Échec de l'upload du fichier: {e}") from e

        url = self.public_url(key)
        logger.info(f"[s3] {key} envoyé ({getattr(file, 'size', 0)} octets)")
        return url

    def delete(self, url: str) -> bool:
        """
        Suppression best-effort: l'échec est journalisé, jamais propagé.
        Renvoie True si S3 a accepté la suppression.
        """
        if not url:
            return False
        key = self.key_from_url(url)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"[s3] Suppression de {key} échouée (non bloquant): {e}")
            return False
        logger.info(f"[s3] {key} supprimé")
        return True
