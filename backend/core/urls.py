from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/playback/", include("playback.urls")),
    path("api/progress/", include("progress.urls")),
]
