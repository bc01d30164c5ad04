import enum
import logging
from typing import Awaitable, Callable, Optional

from playback.state import PlaybackState
from providers.base import ProviderCandidate, StreamRequest
from providers.liveness import probe_url
from providers.ranking import load_ranked_providers
from providers.resolver import resolve_candidate

logger = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    INITIALIZING = "initializing"
    LOADING = "loading"
    PLAYING = "playing"
    FAILED = "failed"
    EXHAUSTED = "exhausted"


class FallbackOrchestrator:
    """
    Picks the source shown in the player.

    Providers are walked in ranked order. Each one is resolved against the
    current canonical position, probed, and committed if the probe does not
    report it missing. Embed failures and manual switches move on to the
    next untried provider; when none remain the session is exhausted.

    Every ``start`` bumps ``generation``. Async work started under an older
    generation checks it before committing anything, which is how a changed
    request cancels in-flight probes.
    """

    def __init__(
        self,
        state: PlaybackState,
        *,
        on_commit: Callable[[ProviderCandidate], Awaitable[None]],
        on_exhausted: Callable[[], Awaitable[None]],
        probe: Callable[[str], Awaitable[bool]] = probe_url,
        load_providers: Callable[[str], Awaitable[list]] = load_ranked_providers,
    ):
        self.state = state
        self.on_commit = on_commit
        self.on_exhausted = on_exhausted
        self.probe = probe
        self.load_providers = load_providers

        self.phase = Phase.INITIALIZING
        self.generation = 0
        self.request: Optional[StreamRequest] = None
        self.providers: list = []
        self.current: Optional[ProviderCandidate] = None
        self.committed: list[ProviderCandidate] = []
        self.probing = False

    async def start(self, request: StreamRequest, resume_seconds: float = 0.0):
        self.generation += 1
        generation = self.generation

        self.request = request
        self.phase = Phase.INITIALIZING
        self.providers = []
        self.current = None
        self.committed = []
        self.state.reset_session(resume_seconds)

        providers = await self.load_providers(request.media_type)
        if generation != self.generation:
            return

        self.providers = providers
        await self._advance(generation)

    def cancel(self):
        self.generation += 1

    def _next_untried(self):
        for provider in self.providers:
            if provider.key not in self.state.tried:
                return provider
        return None

    async def _advance(self, generation: int):
        while generation == self.generation:
            provider = self._next_untried()
            if provider is None:
                await self._exhaust()
                return

            self.state.tried.add(provider.key)

            candidate = resolve_candidate(provider, self.request, self.state.position)
            if candidate is None:
                continue

            self.phase = Phase.LOADING
            self.current = candidate

            self.probing = True
            try:
                available = await self.probe(candidate.url)
            finally:
                self.probing = False
            if generation != self.generation:
                return

            if not available:
                logger.info("Skipping provider %s: source not found", candidate.key)
                continue

            self.state.begin_provider(candidate.key)
            self.committed.append(candidate)
            logger.info(
                "Loading %s %s from provider %s",
                self.request.media_type,
                self.request.media_id,
                candidate.key,
            )
            await self.on_commit(candidate)
            return

    async def _exhaust(self):
        self.phase = Phase.EXHAUSTED
        self.current = None
        logger.warning(
            "All providers failed for %s %s (tried: %s)",
            self.request.media_type,
            self.request.media_id,
            ", ".join(sorted(self.state.tried)) or "none",
        )
        await self.on_exhausted()

    def on_player_activity(self):
        if self.phase == Phase.LOADING and self.current is not None and not self.probing:
            self.phase = Phase.PLAYING

    def _can_leave_source(self) -> bool:
        # While probing, the visible source is already on its way out.
        return self.phase in (Phase.LOADING, Phase.PLAYING) and not self.probing

    async def on_embed_error(self):
        if not self._can_leave_source():
            return
        logger.info("Embed from provider %s failed to load", self.state.provider_key)
        self.phase = Phase.FAILED
        await self._advance(self.generation)

    async def manual_switch(self):
        if not self._can_leave_source():
            return
        logger.info("Manual switch away from provider %s", self.state.provider_key)
        await self._advance(self.generation)
