"""
Client S3 (boto3) pour les fichiers du site.
"""

from __future__ import annotations
import os
from typing import Any

import boto3
from django.conf import settings

__all__ = ["is_configured", "get_s3_client"]


def _setting(name: str) -> str:
    return (getattr(settings, name, None) or os.getenv(name) or "").strip()


def is_configured() -> bool:
    """True si le bucket et la région sont renseignés."""
    return bool(_setting("AWS_S3_BUCKET") and _setting("AWS_REGION"))


def get_s3_client() -> Any:
    # sans clés explicites, boto3 suit sa chaîne habituelle (variables, profil, rôle IAM)
    return boto3.client(
        "s3",
        region_name=_setting("AWS_REGION") or None,
        aws_access_key_id=_setting("AWS_ACCESS_KEY_ID") or None,
        aws_secret_access_key=_setting("AWS_SECRET_ACCESS_KEY") or None,
    )
