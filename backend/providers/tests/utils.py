from providers.models import StreamProvider


def make_provider(key="vidking", **overrides):
    """Unsaved provider with sane defaults; pass ``save=True`` to persist."""
    save = overrides.pop("save", False)
    fields = {
        "key": key,
        "name": key.title(),
        "host": f"https://{key}.test",
        "family": StreamProvider.Family.PATH_TMDB,
        "movie_path_template": "/movie/{id}",
        "tv_path_template": "/tv/{id}/{season}/{episode}",
        "priority": 50,
    }
    fields.update(overrides)
    provider = StreamProvider(**fields)
    if save:
        provider.save()
    return provider
