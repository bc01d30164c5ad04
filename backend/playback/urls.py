from django.urls import path

from .views import candidates_view, next_episode_view

urlpatterns = [
    path("candidates/", candidates_view),
    path("next/", next_episode_view),
]
