from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class EpisodeTarget:
    season: int
    episode: int

    def watch_path(self, media_id: str) -> str:
        return f"/tv/{media_id}/watch?season={self.season}&episode={self.episode}"


def next_episode(season: int, episode: int, seasons: Iterable) -> Optional[EpisodeTarget]:
    """
    The episode after ``(season, episode)``, rolling over to the first
    episode of the following season. None at the end of the known seasons.

    ``seasons`` items need ``season_number`` and ``episode_count``.
    """
    by_number = {item.season_number: item for item in seasons}

    current = by_number.get(season)
    if current is None:
        return None

    if episode < current.episode_count:
        return EpisodeTarget(season=season, episode=episode + 1)

    if season + 1 in by_number:
        return EpisodeTarget(season=season + 1, episode=1)

    return None
