from dataclasses import dataclass
from typing import Callable, Optional

from providers.base import StreamRequest
from providers.families import (
    build_path_imdb_url,
    build_path_tmdb_url,
    build_query_tmdb_url,
    build_videoid_tmdb_url,
)


@dataclass(frozen=True)
class FamilyEntry:
    name: str
    build_url: Callable[..., Optional[str]]
    uses_alternate_id: bool = False

    def build(self, provider, request: StreamRequest) -> Optional[str]:
        return self.build_url(provider, request)


FAMILIES = {
    "path-tmdb": FamilyEntry(
        name="path-tmdb",
        build_url=build_path_tmdb_url,
    ),
    "path-imdb": FamilyEntry(
        name="path-imdb",
        build_url=build_path_imdb_url,
        uses_alternate_id=True,
    ),
    "query-tmdb": FamilyEntry(
        name="query-tmdb",
        build_url=build_query_tmdb_url,
    ),
    "videoid-tmdb": FamilyEntry(
        name="videoid-tmdb",
        build_url=build_videoid_tmdb_url,
    ),
}


def get_family(name: str) -> FamilyEntry:
    family = FAMILIES.get(name)
    if not family:
        raise ValueError(f"Unknown provider family: {name}")
    return family
