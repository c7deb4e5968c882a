from django.urls import path

from . import views

urlpatterns = [
    # Site public
    path("public/projects", views.PublicProjectsView.as_view(), name="public_projects"),
    path("public/audio", views.PublicAudioView.as_view(), name="public_audio"),
    path("public/settings/<str:flag>", views.PublicSettingView.as_view(), name="public_setting"),

    # Admin: projets (import avant <record_id>)
    path("projects", views.ProjectListView.as_view(), name="content_projects"),
    path("projects/import/preview", views.ImportPreviewView.as_view(), name="content_import_preview"),
    path("projects/import/template", views.ImportTemplateView.as_view(), name="content_import_template"),
    path("projects/import", views.ImportView.as_view(), name="content_import"),
    path("projects/<str:record_id>", views.ProjectDetailView.as_view(), name="content_project_detail"),

    # Admin: audio
    path("audio", views.AudioListView.as_view(), name="content_audio"),
    path("audio/<str:record_id>", views.AudioDetailView.as_view(), name="content_audio_detail"),

    path("export/<str:target>", views.ExportView.as_view(), name="content_export"),
    path("settings/<str:flag>", views.SettingView.as_view(), name="content_setting"),
]
