from rest_framework import serializers

from .schemas import AUDIO_CATEGORIES, AudioStatus, ProjectStatus


class CredentialSerializer(serializers.Serializer):
    email = serializers.CharField(allow_blank=True, required=False, default="")
    password = serializers.CharField(allow_blank=True, required=False, default="")


class ProjectLinksSerializer(serializers.Serializer):
    app_link = serializers.CharField(allow_blank=True, required=False)
    repository = serializers.CharField(allow_blank=True, required=False)
    maquette = serializers.CharField(allow_blank=True, required=False)
    swagger_yaml = serializers.CharField(allow_blank=True, required=False)
    credentials = CredentialSerializer(many=True, required=False)
    conversion_details = serializers.ListField(child=serializers.CharField(), required=False)


def _text(**kwargs):
    return serializers.CharField(allow_blank=True, required=False, **kwargs)


def _strings():
    return serializers.ListField(child=serializers.CharField(allow_blank=True), required=False)


class ProjectSerializer(serializers.Serializer):
    """
    Champs modifiables d'un projet (noms du document). Tous optionnels: en mise à jour,
    seuls les champs envoyés remplacent ceux du brouillon.
    """

    title = _text()
    subtitle = _text()
    job = _text()
    client = _text()
    description = _text()
    imageUrl = _text()
    imagesUrl = _strings()
    technologies = _strings()
    icons = _strings()
    tags = _strings()
    links = ProjectLinksSerializer(required=False)
    status = serializers.ChoiceField(choices=[s.value for s in ProjectStatus], required=False)
    createdAt = serializers.DateTimeField(required=False)


class AudioFileSerializer(serializers.Serializer):
    title = _text()
    description = _text()
    artist = _text()
    category = serializers.ChoiceField(choices=list(AUDIO_CATEGORIES), required=False)
    fileUrl = _text()
    coverUrl = _text()
    duration = serializers.IntegerField(min_value=0, required=False)
    status = serializers.ChoiceField(choices=[s.value for s in AudioStatus], required=False)
    createdAt = serializers.DateTimeField(required=False)


class MaintenanceFlagSerializer(serializers.Serializer):
    enabled = serializers.BooleanField()


INPUT_SERIALIZERS = {
    "projects": ProjectSerializer,
    "audio": AudioFileSerializer,
}
