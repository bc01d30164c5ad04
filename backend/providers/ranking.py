from channels.db import database_sync_to_async

from providers.models import StreamProvider


def rank_providers(providers, media_type: str) -> list:
    """
    Keep active, healthy providers that serve ``media_type`` and order them
    resume-capable first, then by ascending priority.

    ``sorted`` is stable, so equal keys keep their incoming order.
    """
    eligible = [
        provider
        for provider in providers
        if provider.is_active
        and provider.is_healthy
        and provider.supports(media_type)
    ]
    return sorted(
        eligible,
        key=lambda provider: (not provider.supports_resume, provider.priority),
    )


def get_ranked_providers(media_type: str) -> list:
    providers = StreamProvider.objects.filter(
        is_active=True,
        is_healthy=True,
    ).order_by("id")
    return rank_providers(list(providers), media_type)


load_ranked_providers = database_sync_to_async(get_ranked_providers)
