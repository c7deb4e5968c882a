import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.generics import CreateAPIView
from .serializers import UserSerializer, RegisterSerializer, ChangePasswordSerializer

User = get_user_model()
logger = logging.getLogger(__name__)


class RegisterView(CreateAPIView):
    """Inscription d'un compte admin (désactivable via ALLOW_REGISTRATION)."""

    serializer_class = RegisterSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request, *args, **kwargs):
        if not getattr(settings, "ALLOW_REGISTRATION", False):
            return Response(
                {"error": "Les inscriptions sont fermées."},
                status=status.HTTP_403_FORBIDDEN,
            )
        response = super().create(request, *args, **kwargs)
        logger.info(f"[auth] Nouveau compte admin: {response.data.get('email')}")
        return response


class MeView(APIView):
    """Retourne le profil de l'utilisateur courant."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)

    def patch(self, request):
        serializer = UserSerializer(instance=request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class ChangePasswordView(APIView):
    """Permet à l'utilisateur connecté de changer son mot de passe."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"detail": "Mot de passe modifié avec succès."}, status=status.HTTP_200_OK)
