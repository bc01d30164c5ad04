import logging

from channels.db import database_sync_to_async
from django.db import DatabaseError, transaction
from django.utils import timezone

from providers.base import StreamRequest
from .models import COMPLETION_RATIO, MOVIE_EPISODE_KEY, ProgressRecord, WatchSummary

logger = logging.getLogger(__name__)

COMPLETED = "completed"
UNCHANGED = "unchanged"
NO_PROGRESS = "no-progress"


def _episode_key(request: StreamRequest) -> tuple[int, int]:
    if request.is_series:
        return request.season, request.episode
    return MOVIE_EPISODE_KEY


def upsert_progress(profile_id, request: StreamRequest, progress: float, duration: float):
    season, episode = _episode_key(request)
    record, _ = ProgressRecord.objects.update_or_create(
        profile_id=profile_id,
        media_type=request.media_type,
        media_id=request.media_id,
        season=season,
        episode=episode,
        defaults={
            "progress": progress,
            "duration": duration,
        },
    )
    return record


def touch_summary(profile_id, request: StreamRequest, progress: float, duration: float, metadata=None):
    summary, _ = WatchSummary.objects.get_or_create(
        profile_id=profile_id,
        media_type=request.media_type,
        media_id=request.media_id,
    )

    if summary.status not in WatchSummary.STICKY_STATUSES:
        summary.status = WatchSummary.Status.WATCHING

    if request.is_series:
        summary.last_season = request.season
        summary.last_episode = request.episode

    summary.progress = progress
    if duration:
        summary.total_duration = duration
    elif metadata is not None and metadata.total_duration_seconds:
        summary.total_duration = metadata.total_duration_seconds

    if metadata is not None:
        summary.title = metadata.title or summary.title
        summary.poster_path = metadata.poster_path or summary.poster_path
        if metadata.genres:
            summary.genres = metadata.genres

    summary.save()
    return summary


def write_progress(profile_id, request: StreamRequest, progress: float, duration: float, metadata=None):
    with transaction.atomic():
        record = upsert_progress(profile_id, request, progress, duration)
        touch_summary(profile_id, request, progress, duration, metadata)
    return record


async def flush(profile_id, request: StreamRequest, state, metadata=None) -> bool:
    """
    Commit the session's current position.

    Reads ``state`` at call time. Returns False without writing when nothing
    is playing, the tab is hidden, or the position is still 0; also returns
    False when the database write fails, since the next tick retries with
    fresher data anyway.
    """
    if not state.is_playing or not state.is_visible:
        return False

    position = state.position
    if position <= 0:
        return False

    try:
        await database_sync_to_async(write_progress)(
            profile_id,
            request,
            position,
            state.duration,
            metadata,
        )
    except DatabaseError:
        logger.exception(
            "Failed to save progress for %s %s (profile %s)",
            request.media_type,
            request.media_id,
            profile_id,
        )
        return False

    logger.debug("Saved progress %.0fs for %s %s", position, request.media_type, request.media_id)
    return True


def get_resume_seconds(profile_id, request: StreamRequest) -> float:
    if not profile_id:
        return 0.0

    season, episode = _episode_key(request)
    record = ProgressRecord.objects.filter(
        profile_id=profile_id,
        media_type=request.media_type,
        media_id=request.media_id,
        season=season,
        episode=episode,
    ).first()
    return record.progress if record else 0.0


def check_and_complete_movie(profile_id, media_id: str) -> str:
    """
    Promote a movie from ``watching`` to ``completed`` once more than 90% of
    it has been watched. Any other status is left alone, so repeated calls
    are harmless.
    """
    season, episode = MOVIE_EPISODE_KEY
    record = ProgressRecord.objects.filter(
        profile_id=profile_id,
        media_type="movie",
        media_id=media_id,
        season=season,
        episode=episode,
    ).first()

    if not record or not record.duration:
        return NO_PROGRESS

    if record.ratio <= COMPLETION_RATIO:
        return UNCHANGED

    updated = WatchSummary.objects.filter(
        profile_id=profile_id,
        media_type="movie",
        media_id=media_id,
        status=WatchSummary.Status.WATCHING,
    ).update(status=WatchSummary.Status.COMPLETED, updated_at=timezone.now())

    if updated:
        logger.info("Marked movie %s completed for profile %s", media_id, profile_id)
        return COMPLETED

    return UNCHANGED
