from django.urls import path

from .views import complete_movie_view, resume_progress_view

urlpatterns = [
    path("resume/", resume_progress_view),
    path("complete/", complete_movie_view),
]
