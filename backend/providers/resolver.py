# providers/resolver.py

import logging
import math

from providers.base import ProviderCandidate, StreamRequest
from providers.families import set_query_params
from providers.registry import get_family

logger = logging.getLogger(__name__)


def build_provider_url(
    provider,
    request: StreamRequest,
    resume_seconds: float | None = None,
) -> str | None:
    """
    Build the embed URL for ``provider`` or return None when this provider
    cannot serve the request.
    """
    try:
        family = get_family(provider.family)
    except ValueError:
        logger.warning(
            "Provider %s has unknown family %r", provider.key, provider.family
        )
        return None

    url = family.build(provider, request)
    if not url:
        return None

    if provider.extra_params and isinstance(provider.extra_params, dict):
        url = set_query_params(url, provider.extra_params)

    if (
        resume_seconds
        and resume_seconds > 0
        and provider.supports_resume
        and provider.resume_param
    ):
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{provider.resume_param}={math.floor(resume_seconds)}"

    return url


def resolve_candidate(
    provider,
    request: StreamRequest,
    resume_seconds: float | None = None,
) -> ProviderCandidate | None:
    url = build_provider_url(provider, request, resume_seconds)
    if url is None:
        logger.debug(
            "Provider %s cannot resolve %s %s",
            provider.key,
            request.media_type,
            request.media_id,
        )
        return None

    return ProviderCandidate(
        key=provider.key,
        name=provider.name,
        url=url,
        supports_resume=provider.supports_resume,
        resume_param=provider.resume_param,
    )


def build_candidates(
    providers,
    request: StreamRequest,
    resume_seconds: float | None = None,
) -> list[ProviderCandidate]:
    candidates = []
    for provider in providers:
        candidate = resolve_candidate(provider, request, resume_seconds)
        if candidate:
            candidates.append(candidate)
    return candidates
