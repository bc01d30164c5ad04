import logging

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)


def _probe_timeout() -> float:
    return settings.PLAYBACK.get("PROBE_TIMEOUT_SECONDS", 5)


async def probe_url(url: str, *, client: httpx.AsyncClient | None = None) -> bool:
    """
    Lightweight existence check for an embed URL.

    Only an explicit 404 marks the URL unavailable. Any other status, any
    transport error and a URL httpx refuses to send count as available:
    probing is advisory and fails open.
    """
    try:
        if client is not None:
            response = await client.head(url, follow_redirects=True)
        else:
            async with httpx.AsyncClient(timeout=_probe_timeout()) as owned_client:
                response = await owned_client.head(url, follow_redirects=True)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.info("Liveness probe for %s failed (%s), assuming available", url, exc)
        return True

    if response.status_code == 404:
        logger.info("Liveness probe for %s returned 404", url)
        return False

    return True
