from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.api_response import error, success
from providers.base import StreamRequest
from .models import WatchSummary
from .serializers import (
    CompleteMovieSerializer,
    StreamRequestQuerySerializer,
    WatchSummarySerializer,
)
from .services import check_and_complete_movie, get_resume_seconds


def parse_stream_request(data):
    """
    Validate query/body data into ``(profile_id, StreamRequest)``.
    Raises ``ValueError`` with a readable message when the input is unusable.
    """
    serializer = StreamRequestQuerySerializer(data=data)
    if not serializer.is_valid():
        raise ValueError(serializer.errors)

    params = serializer.validated_data
    request = StreamRequest(
        media_id=params["media_id"],
        media_type=params["media_type"],
        season=params.get("season"),
        episode=params.get("episode"),
        alternate_id=params.get("imdb_id"),
    )
    return params.get("profile"), request


@api_view(["GET"])
def resume_progress_view(request):
    try:
        profile_id, stream_request = parse_stream_request(request.query_params)
    except ValueError as exc:
        return Response(
            error("invalid_request", "Invalid stream request", exc.args[0]),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if not profile_id:
        return Response(
            error("profile_required", "profile is required"),
            status=status.HTTP_400_BAD_REQUEST,
        )

    return Response(success({
        "media_id": stream_request.media_id,
        "media_type": stream_request.media_type,
        "season": stream_request.season,
        "episode": stream_request.episode,
        "resume_seconds": get_resume_seconds(profile_id, stream_request),
    }))


@api_view(["POST"])
def complete_movie_view(request):
    serializer = CompleteMovieSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            error("invalid_request", "profile and media_id required", serializer.errors),
            status=status.HTTP_400_BAD_REQUEST,
        )

    profile_id = serializer.validated_data["profile"]
    media_id = serializer.validated_data["media_id"]

    outcome = check_and_complete_movie(profile_id, media_id)

    summary = WatchSummary.objects.filter(
        profile_id=profile_id,
        media_type="movie",
        media_id=media_id,
    ).first()

    return Response(success({
        "outcome": outcome,
        "summary": WatchSummarySerializer(summary).data if summary else None,
    }))
