# providers/base.py

from dataclasses import dataclass
from typing import Optional

MEDIA_TYPES = {"movie", "tv"}


@dataclass(frozen=True)
class StreamRequest:
    media_id: str  # TMDB id
    media_type: str  # "movie" | "tv"
    season: Optional[int] = None
    episode: Optional[int] = None

    # IMDB id, only needed by path-imdb providers
    alternate_id: Optional[str] = None

    def __post_init__(self):
        if self.media_type not in MEDIA_TYPES:
            raise ValueError(f"Unsupported media type: {self.media_type}")

        if not self.media_id:
            raise ValueError("media_id is required")

        has_season = self.season is not None
        has_episode = self.episode is not None
        if has_season != has_episode:
            raise ValueError("season and episode must be given together")

        if self.media_type == "tv" and not has_season:
            raise ValueError("TV playback requires season and episode")

        if self.media_type == "movie" and has_season:
            raise ValueError("Movie playback does not take season or episode")

    @property
    def is_series(self) -> bool:
        return self.media_type == "tv"

    def with_episode(self, season: int, episode: int) -> "StreamRequest":
        return StreamRequest(
            media_id=self.media_id,
            media_type=self.media_type,
            season=season,
            episode=episode,
            alternate_id=self.alternate_id,
        )


@dataclass(frozen=True)
class ProviderCandidate:
    key: str
    name: str
    url: str
    supports_resume: bool = False
    resume_param: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "url": self.url,
            "supports_resume": self.supports_resume,
            "resume_param": self.resume_param,
        }
