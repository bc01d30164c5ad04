"""
Read-only access to the TMDB content details the playback core needs:
title, poster, runtime, genres, IMDB id and the season layout.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Optional

import httpx
from django.conf import settings

from common.redis_client import cache_get_json, cache_set_json, get_redis_client
from common.redis_keys import content_detail_key

logger = logging.getLogger(__name__)


@dataclass
class SeasonInfo:
    season_number: int
    episode_count: int


@dataclass
class ContentDetail:
    media_id: str
    media_type: str  # "movie" or "tv"
    title: str
    poster_path: Optional[str] = None
    runtime_minutes: int = 0
    genres: list[str] = field(default_factory=list)
    imdb_id: Optional[str] = None
    seasons: list[SeasonInfo] = field(default_factory=list)

    @property
    def total_duration_seconds(self) -> int:
        return self.runtime_minutes * 60

    def to_cache(self) -> dict:
        return asdict(self)

    @classmethod
    def from_cache(cls, data: dict) -> "ContentDetail":
        seasons = [SeasonInfo(**season) for season in data.get("seasons", [])]
        return cls(**{**data, "seasons": seasons})

    @classmethod
    def from_tmdb(cls, media_type: str, data: dict) -> "ContentDetail":
        if media_type == "movie":
            title = data.get("title") or ""
            runtime = data.get("runtime") or 0
        else:
            title = data.get("name") or ""
            run_times = data.get("episode_run_time") or []
            runtime = run_times[0] if run_times else 0

        imdb_id = data.get("imdb_id") or (data.get("external_ids") or {}).get("imdb_id")

        seasons = [
            SeasonInfo(
                season_number=season["season_number"],
                episode_count=season.get("episode_count") or 0,
            )
            for season in data.get("seasons") or []
            if season.get("season_number") is not None
        ]

        return cls(
            media_id=str(data.get("id")),
            media_type=media_type,
            title=title,
            poster_path=data.get("poster_path"),
            runtime_minutes=int(runtime),
            genres=[genre["name"] for genre in data.get("genres") or [] if genre.get("name")],
            imdb_id=imdb_id,
            seasons=seasons,
        )


async def fetch_tmdb(path: str, params: dict | None = None) -> dict:
    if not settings.TMDB_API_KEY:
        raise ValueError("TMDB_API_KEY is not configured")

    async with httpx.AsyncClient(timeout=10) as client:
        response = await client.get(
            f"{settings.TMDB_BASE_URL}{path}",
            params={
                "api_key": settings.TMDB_API_KEY,
                **(params or {}),
            },
        )
        response.raise_for_status()
        return response.json()


async def get_content_detail(media_type: str, media_id: str) -> ContentDetail:
    if media_type not in {"movie", "tv"}:
        raise ValueError(f"Unsupported media type: {media_type}")

    client = get_redis_client()
    key = content_detail_key(media_type, media_id)

    cached = await cache_get_json(client, key)
    if cached:
        return ContentDetail.from_cache(cached)

    data = await fetch_tmdb(
        f"/{media_type}/{media_id}",
        {"append_to_response": "external_ids"},
    )
    detail = ContentDetail.from_tmdb(media_type, data)

    await cache_set_json(
        client,
        key,
        detail.to_cache(),
        settings.PLAYBACK.get("CATALOG_CACHE_TTL", 86400),
    )
    logger.debug("Cached content detail for %s %s", media_type, media_id)
    return detail
