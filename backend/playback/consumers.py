import asyncio
import dataclasses
import json
import logging
from urllib.parse import parse_qs

import httpx
from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings

from playback.navigation import next_episode
from playback.orchestrator import FallbackOrchestrator
from playback.reconciler import SignalReconciler
from playback.signals import Unknown
from playback.state import PlaybackState
from progress.services import check_and_complete_movie, flush, get_resume_seconds
from providers.base import StreamRequest
from providers.catalog import get_content_detail
from providers.liveness import probe_url
from providers.ranking import load_ranked_providers

logger = logging.getLogger(__name__)

EXHAUSTED_MESSAGE = "No source is available for this title right now. Reload to try again."


def _query_int(query: dict, name: str):
    values = query.get(name)
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


class PlaybackSessionConsumer(AsyncWebsocketConsumer):
    """
    One playback session per socket.

    The page relays everything the embedded player posts to it as
    ``PLAYER_MESSAGE`` events and loads whatever source ``LOAD_SOURCE`` tells
    it to. The session owns the canonical state, the fallback orchestrator,
    the signal reconciler, and the tick and flush timers.
    """

    async def connect(self):
        kwargs = self.scope["url_route"]["kwargs"]
        query = parse_qs(self.scope.get("query_string", b"").decode())

        self.profile_id = self.scope.get("profile_id")

        season = _query_int(query, "season")
        episode = _query_int(query, "episode")
        if kwargs["media_type"] == "tv" and season is None and episode is None:
            season, episode = 1, 1

        try:
            request = StreamRequest(
                media_id=kwargs["media_id"],
                media_type=kwargs["media_type"],
                season=season,
                episode=episode,
            )
        except ValueError:
            await self.close(code=4002)
            return

        self.request = request
        self.state = PlaybackState()
        self.reconciler = SignalReconciler(self.state, self.send_seek_commands)
        self.orchestrator = FallbackOrchestrator(
            self.state,
            on_commit=self.load_source,
            on_exhausted=self.report_exhausted,
            probe=probe_url,
            load_providers=load_ranked_providers,
        )
        self.near_completion = False
        self._timers: list[asyncio.Task] = []
        self._tasks: set[asyncio.Task] = set()

        await self.accept()

        self.detail = await self.fetch_detail(request)
        if self.detail and self.detail.imdb_id:
            request = dataclasses.replace(request, alternate_id=self.detail.imdb_id)

        if self.profile_id and request.media_type == "movie":
            await database_sync_to_async(check_and_complete_movie)(
                self.profile_id, request.media_id
            )

        await self.start_session(request)

    async def disconnect(self, close_code):
        if not hasattr(self, "state"):
            return

        self._stop_timers()
        await self.flush_progress()
        self._stop_session_work()

    # ---------------- inbound ----------------

    async def receive(self, text_data=None, bytes_data=None):
        if not text_data:
            return

        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            return

        if not isinstance(data, dict):
            return

        event_type = data.get("type")

        if event_type == "PLAYER_MESSAGE":
            signal = await self.reconciler.receive(data.get("data"))
            if not isinstance(signal, Unknown):
                self.orchestrator.on_player_activity()
            await self.report_near_completion()
            return

        if event_type == "EMBED_ERROR":
            self._spawn(self.orchestrator.on_embed_error())
            return

        if event_type == "SWITCH_PROVIDER":
            self._spawn(self.orchestrator.manual_switch())
            return

        if event_type == "VISIBILITY":
            self.state.is_visible = bool(data.get("visible", True))
            return

        if event_type == "CHANGE_EPISODE":
            await self.change_episode(data.get("season"), data.get("episode"))
            return

    async def change_episode(self, season, episode):
        if not self.request.is_series:
            await self.send_error("Only TV sessions can change episode")
            return

        try:
            request = self.request.with_episode(int(season), int(episode))
        except (TypeError, ValueError):
            await self.send_error("Invalid season or episode")
            return

        await self.flush_progress()
        await self.start_session(request)

    # ---------------- session lifecycle ----------------

    async def start_session(self, request: StreamRequest):
        self._stop_timers()
        self._stop_session_work()

        self.request = request
        self.near_completion = False

        resume_seconds = 0.0
        if self.profile_id:
            resume_seconds = await database_sync_to_async(get_resume_seconds)(
                self.profile_id, request
            )

        await self.send_event({
            "type": "SESSION_STARTED",
            "media_type": request.media_type,
            "media_id": request.media_id,
            "season": request.season,
            "episode": request.episode,
            "resume_seconds": resume_seconds,
        })

        playback = settings.PLAYBACK
        self._timers = [
            asyncio.create_task(self._tick_loop(playback.get("TICK_SECONDS", 1))),
            asyncio.create_task(self._flush_loop(playback.get("FLUSH_INTERVAL_SECONDS", 60))),
        ]
        self._spawn(self.orchestrator.start(request, resume_seconds))

    def _spawn(self, coro):
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _stop_timers(self):
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _stop_session_work(self):
        self.orchestrator.cancel()
        self.reconciler.cancel()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    async def _tick_loop(self, interval: float):
        while True:
            await asyncio.sleep(interval)
            if self.state.tick(interval):
                await self.report_near_completion()

    async def _flush_loop(self, interval: float):
        while True:
            await asyncio.sleep(interval)
            await self.flush_progress()

    async def flush_progress(self) -> bool:
        if not self.profile_id:
            return False
        return await flush(self.profile_id, self.request, self.state, self.detail)

    async def fetch_detail(self, request: StreamRequest):
        try:
            return await get_content_detail(request.media_type, request.media_id)
        except (ValueError, httpx.HTTPError) as exc:
            logger.warning(
                "Content detail unavailable for %s %s: %s",
                request.media_type,
                request.media_id,
                exc,
            )
            return None

    # ---------------- outbound ----------------

    async def send_event(self, payload: dict):
        await self.send(text_data=json.dumps(payload))

    async def send_error(self, message):
        await self.send_event({
            "type": "ERROR",
            "message": message,
        })

    async def load_source(self, candidate):
        self.reconciler.bind_provider(candidate)
        await self.send_event({
            "type": "LOAD_SOURCE",
            "provider": candidate.key,
            "name": candidate.name,
            "url": candidate.url,
            "resume_seconds": self.state.resume_offset,
        })

    async def send_seek_commands(self, commands):
        await self.send_event({
            "type": "SEEK_COMMANDS",
            "commands": commands,
        })

    async def report_exhausted(self):
        await self.send_event({
            "type": "PLAYBACK_EXHAUSTED",
            "message": EXHAUSTED_MESSAGE,
            "tried": sorted(self.state.tried),
        })

    async def report_near_completion(self):
        near = self.state.near_completion
        if near == self.near_completion:
            return
        self.near_completion = near

        target = None
        if near and self.request.is_series and self.detail:
            upcoming = next_episode(
                self.request.season,
                self.request.episode,
                self.detail.seasons,
            )
            if upcoming:
                target = {
                    "season": upcoming.season,
                    "episode": upcoming.episode,
                    "path": upcoming.watch_path(self.request.media_id),
                }

        await self.send_event({
            "type": "NEAR_COMPLETION",
            "value": near,
            "next": target,
        })
