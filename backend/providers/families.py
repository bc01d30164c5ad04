# providers/families.py

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from providers.base import StreamRequest

DEFAULT_QUERY_MOVIE_PATH = "/embed/movie"
DEFAULT_QUERY_TV_PATH = "/embed/tv"


def set_query_params(url: str, params: dict) -> str:
    """
    Assign query parameters on ``url``, replacing existing keys in place and
    appending new ones in the given order.
    """
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)

    for key, value in params.items():
        key = str(key)
        value = str(value)
        replaced = False
        updated = []
        for existing_key, existing_value in query:
            if existing_key == key:
                if not replaced:
                    updated.append((key, value))
                    replaced = True
                continue
            updated.append((existing_key, existing_value))
        if not replaced:
            updated.append((key, value))
        query = updated

    return urlunsplit(parts._replace(query=urlencode(query)))


def _join(host: str, path: str) -> str:
    return host.rstrip("/") + path


def _fill_template(template: str, media_id: str, request: StreamRequest) -> str:
    path = template.replace("{id}", media_id)
    if request.is_series:
        path = (
            path
            .replace("{season}", str(request.season))
            .replace("{episode}", str(request.episode))
        )
    return path


def _build_path_url(provider, request: StreamRequest, media_id: str | None) -> str | None:
    if not media_id:
        return None

    template = (
        provider.tv_path_template if request.is_series
        else provider.movie_path_template
    )
    if not template:
        return None

    return _join(provider.host, _fill_template(template, media_id, request))


def build_path_tmdb_url(provider, request: StreamRequest) -> str | None:
    return _build_path_url(provider, request, request.media_id)


def build_path_imdb_url(provider, request: StreamRequest) -> str | None:
    return _build_path_url(provider, request, request.alternate_id)


def build_query_tmdb_url(provider, request: StreamRequest) -> str | None:
    if request.is_series:
        path = provider.tv_path_template or DEFAULT_QUERY_TV_PATH
        params = {
            "tmdb": request.media_id,
            "season": request.season,
            "episode": request.episode,
        }
    else:
        path = provider.movie_path_template or DEFAULT_QUERY_MOVIE_PATH
        params = {"tmdb": request.media_id}

    return set_query_params(_join(provider.host, path), params)


def build_videoid_tmdb_url(provider, request: StreamRequest) -> str | None:
    params = {
        "video_id": request.media_id,
        "tmdb": "1",
    }
    if request.is_series:
        params["s"] = request.season
        params["e"] = request.episode

    return set_query_params(provider.host, params)
