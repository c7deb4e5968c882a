from django.urls import path
from .views import ChatView, ContactView, IntegrationsHealthView, LeadEmailView

urlpatterns = [
    path("chat", ChatView.as_view(), name="chat"),
    path("send-lead-email", LeadEmailView.as_view(), name="send_lead_email"),
    path("contact", ContactView.as_view(), name="contact"),
    path("integrations/health", IntegrationsHealthView.as_view(), name="integrations_health"),
]
