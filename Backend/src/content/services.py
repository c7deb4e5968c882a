"""
Fabrique des adaptateurs (store Firestore, uploader S3) utilisés par les vues et commandes.
Les tests remplacent ces deux fonctions.
"""
from integrations.firebase import FirebaseConfigError, get_firestore_client

from .assets import AssetUploader
from .errors import StoreError
from .store import RecordStore


def get_store() -> RecordStore:
    try:
        return RecordStore(get_firestore_client())
    except FirebaseConfigError as e:
        raise StoreError(str(e)) from e


def get_uploader() -> AssetUploader:
    return AssetUploader.from_settings()
