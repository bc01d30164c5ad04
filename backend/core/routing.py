from django.urls import path

from playback.consumers import PlaybackSessionConsumer

websocket_urlpatterns = [
    path(
        "ws/playback/<str:media_type>/<str:media_id>/",
        PlaybackSessionConsumer.as_asgi(),
    ),
]
