from __future__ import annotations
import logging
from typing import Any, Dict, List

from django.utils import timezone
from rest_framework import permissions, serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import firebase, llm, mailer, s3
from .llm import LLMError, generate_reply, summarize_history
from .mailer import is_valid_email, send_contact_emails, send_lead_emails
from .tasks import schedule_lead_emails

logger = logging.getLogger(__name__)


class IntegrationsHealthView(APIView):
    """Services externes configurés (aucun appel réseau)."""
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({
            "firestore": firebase.is_configured(),
            "s3": s3.is_configured(),
            "llm": llm.is_configured(),
            "smtp": mailer.is_configured(),
        })


def _history(raw: Any) -> List[Dict[str, str]]:
    if not isinstance(raw, list):
        return []
    return [
        {"role": str(t.get("role", "")), "content": str(t.get("content", ""))}
        for t in raw
        if isinstance(t, dict)
    ]


def _body(request) -> Dict[str, Any]:
    """Corps JSON attendu sous forme d'objet; tout autre type est traité comme vide."""
    return request.data if isinstance(request.data, dict) else {}


class ChatView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        data = _body(request)
        message = data.get("message")
        if not message or not isinstance(message, str) or not message.strip():
            return Response(
                {"error": "Message is required and must be a string"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        history = _history(data.get("conversationHistory"))
        logger.info(f"[chat] Message reçu: {message[:50]!r}")
        try:
            reply = generate_reply(message, history)
        except LLMError as e:
            logger.error(f"[chat] Échec: {e}")
            return Response(
                {"error": "Failed to process message", "details": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if reply.captured_email and is_valid_email(reply.captured_email):
            logger.info(f"[chat] E-mail capturé: {reply.captured_email}")
            schedule_lead_emails(reply.captured_email, summarize_history(history))
        return Response(reply.to_json())


class LeadEmailView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        data = _body(request)
        email = data.get("email")
        if not email or not isinstance(email, str):
            return Response({"error": "Email is required"}, status=status.HTTP_400_BAD_REQUEST)
        if not is_valid_email(email):
            return Response({"error": "Invalid email format"}, status=status.HTTP_400_BAD_REQUEST)

        summary = data.get("conversationSummary") or ""
        delivered = send_lead_emails(email, str(summary))
        return Response({
            "success": True,
            "message": "Lead captured and emails sent successfully",
            "email": email,
            "timestamp": timezone.now().isoformat(),
            "delivered": delivered,
        })


class ContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.CharField(max_length=254)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    subject = serializers.CharField(max_length=300)
    message = serializers.CharField(max_length=5000)

    def validate_email(self, value):
        if not is_valid_email(value):
            raise serializers.ValidationError("Adresse e-mail invalide")
        return value


class ContactView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = ContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        delivered = send_contact_emails(
            data["name"], data["email"], data["subject"], data["message"], phone=data.get("phone")
        )
        return Response({
            "success": True,
            "message": "Message envoyé",
            "email": data["email"],
            "timestamp": timezone.now().isoformat(),
            "delivered": delivered,
        })
