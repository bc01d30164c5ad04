import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

from django.conf import settings

from playback.signals import (
    Pause,
    Play,
    PlayerSignal,
    TimeUpdate,
    Unknown,
    build_seek_commands,
    parse_player_message,
)
from playback.state import PlaybackState

logger = logging.getLogger(__name__)

SendCommands = Callable[[list[dict]], Awaitable[None]]


class SignalReconciler:
    """
    Folds player messages into a ``PlaybackState`` and, for providers that
    cannot resume through their URL, pushes seek commands at the player.

    The seek burst goes out once per provider load: right after the first
    message from the embed, then again after each of ``retry_delays``
    seconds. Nothing acknowledges it.
    """

    def __init__(
        self,
        state: PlaybackState,
        send_commands: SendCommands,
        *,
        retry_delays: Optional[Iterable[float]] = None,
    ):
        if retry_delays is None:
            retry_delays = settings.PLAYBACK.get("SEEK_RETRY_DELAYS", (1, 3, 5))

        self.state = state
        self.send_commands = send_commands
        self.retry_delays = tuple(retry_delays)
        self.url_resume = False
        self._tasks: set[asyncio.Task] = set()

    def bind_provider(self, candidate):
        """Reset per-provider bookkeeping after a new source is committed."""
        self.cancel()
        self.url_resume = bool(candidate.supports_resume and candidate.resume_param)

    async def receive(self, raw) -> PlayerSignal:
        await self._maybe_inject_seek()

        signal = parse_player_message(raw)
        self.apply(signal)
        return signal

    def apply(self, signal: PlayerSignal) -> bool:
        """Apply one signal. Returns False for unrecognized input."""
        state = self.state

        if isinstance(signal, Play):
            state.is_playing = True
        elif isinstance(signal, Pause):
            state.is_playing = False
        elif isinstance(signal, TimeUpdate):
            state.apply_duration(signal.duration)
            if state.apply_reported_position(signal.position):
                logger.debug("Player position override to %.1fs", state.position)
            # Time updates only arrive while the video runs.
            state.is_playing = True
        elif isinstance(signal, Unknown):
            return False

        return True

    def _needs_seek(self) -> bool:
        state = self.state
        return (
            state.provider_key is not None
            and not state.has_seeked
            and state.resume_offset > 0
            and not self.url_resume
        )

    async def _maybe_inject_seek(self):
        if not self._needs_seek():
            return

        state = self.state
        state.has_seeked = True
        commands = build_seek_commands(state.resume_offset)
        logger.info(
            "Injecting seek to %ds on provider %s",
            int(state.resume_offset),
            state.provider_key,
        )

        await self.send_commands(commands)

        for delay in self.retry_delays:
            task = asyncio.create_task(
                self._resend_later(delay, commands, state.provider_key)
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _resend_later(self, delay: float, commands: list[dict], provider_key: str):
        await asyncio.sleep(delay)
        if self.state.provider_key != provider_key:
            return
        await self.send_commands(commands)

    def cancel(self):
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
