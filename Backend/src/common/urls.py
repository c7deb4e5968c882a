from django.urls import path

from . import health, views

# Sondes et infos d'environnement: publiques, sans accès aux services externes
urlpatterns = [
    path("health", health.health, name="health"),
    path("ping", views.PingView.as_view(), name="ping"),
    path("info", views.InfoView.as_view(), name="info"),
]
