import httpx
from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.api_response import error, success
from progress.services import get_resume_seconds
from progress.views import parse_stream_request
from providers.catalog import get_content_detail
from providers.ranking import get_ranked_providers
from providers.resolver import build_candidates
from .navigation import next_episode


@api_view(["GET"])
def candidates_view(request):
    try:
        profile_id, stream_request = parse_stream_request(request.query_params)
    except ValueError as exc:
        return Response(
            error("invalid_request", "Invalid stream request", exc.args[0]),
            status=status.HTTP_400_BAD_REQUEST,
        )

    resume_seconds = get_resume_seconds(profile_id, stream_request)
    providers = get_ranked_providers(stream_request.media_type)
    candidates = build_candidates(providers, stream_request, resume_seconds)

    return Response(success({
        "resume_seconds": resume_seconds,
        "candidates": [candidate.as_dict() for candidate in candidates],
    }))


@api_view(["GET"])
def next_episode_view(request):
    try:
        _, stream_request = parse_stream_request(request.query_params)
    except ValueError as exc:
        return Response(
            error("invalid_request", "Invalid stream request", exc.args[0]),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if not stream_request.is_series:
        return Response(
            error("not_a_series", "Only TV shows have a next episode"),
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        detail = async_to_sync(get_content_detail)("tv", stream_request.media_id)
    except (ValueError, httpx.HTTPError):
        return Response(
            error("catalog_unavailable", "Could not load season data"),
            status=status.HTTP_502_BAD_GATEWAY,
        )

    target = next_episode(stream_request.season, stream_request.episode, detail.seasons)
    if target is None:
        return Response(success({"next": None}))

    return Response(success({
        "next": {
            "season": target.season,
            "episode": target.episode,
            "path": target.watch_path(stream_request.media_id),
        }
    }))
