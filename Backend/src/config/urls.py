from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),

    # APIs
    path("api/common/", include("common.urls")),
    path("api/auth/", include("users.urls")),
    path("api/content/", include("content.urls")),
    # chat, leads, contact: chemins publics à la racine de /api/
    path("api/", include("integrations.urls")),
]
