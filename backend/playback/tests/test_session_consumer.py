import uuid
from unittest.mock import AsyncMock, patch

from channels.db import database_sync_to_async
from channels.testing import WebsocketCommunicator
from django.test import TransactionTestCase

from core.asgi import application
from progress.models import ProgressRecord, WatchSummary
from providers.catalog import ContentDetail, SeasonInfo
from providers.tests.utils import make_provider
from .utils import wait_for_event

DETAILS = {
    "movie": ContentDetail(
        media_id="550",
        media_type="movie",
        title="Fight Club",
        poster_path="/fc.jpg",
        runtime_minutes=139,
        genres=["Drama"],
        imdb_id="tt0137523",
    ),
    "tv": ContentDetail(
        media_id="1399",
        media_type="tv",
        title="Game of Thrones",
        runtime_minutes=60,
        seasons=[
            SeasonInfo(season_number=1, episode_count=10),
            SeasonInfo(season_number=2, episode_count=10),
        ],
    ),
}


class PlaybackSessionTests(TransactionTestCase):
    reset_sequences = True

    def setUp(self):
        make_provider("a", priority=10, save=True)
        make_provider("b", priority=5, save=True)

        self.profile = uuid.uuid4()
        self.probe = AsyncMock(return_value=True)

        patchers = [
            patch("playback.consumers.probe_url", new=self.probe),
            patch(
                "playback.consumers.get_content_detail",
                new=AsyncMock(side_effect=lambda media_type, media_id: DETAILS[media_type]),
            ),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)

    def _connect(self, path, profile=True):
        query = f"profile={self.profile}" if profile else ""
        if "?" in path:
            url = f"{path}&{query}"
        else:
            url = f"{path}?{query}"
        return WebsocketCommunicator(application, url)

    async def test_embed_errors_walk_providers_until_exhausted(self):
        communicator = self._connect("/ws/playback/movie/550/", profile=False)
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        first = await wait_for_event(communicator, "LOAD_SOURCE")
        self.assertEqual(first["provider"], "b")
        self.assertEqual(first["url"], "https://b.test/movie/550")

        await communicator.send_json_to({"type": "EMBED_ERROR"})
        second = await wait_for_event(communicator, "LOAD_SOURCE")
        self.assertEqual(second["provider"], "a")

        await communicator.send_json_to({"type": "EMBED_ERROR"})
        exhausted = await wait_for_event(communicator, "PLAYBACK_EXHAUSTED")
        self.assertEqual(exhausted["tried"], ["a", "b"])
        self.assertTrue(exhausted["message"])

        await communicator.disconnect()

    async def test_missing_source_is_skipped(self):
        self.probe.side_effect = lambda url: not url.startswith("https://b.test")

        communicator = self._connect("/ws/playback/movie/550/")
        await communicator.connect()

        event = await wait_for_event(communicator, "LOAD_SOURCE")
        self.assertEqual(event["provider"], "a")

        await communicator.disconnect()

    async def test_resume_without_url_support_injects_seek(self):
        await database_sync_to_async(ProgressRecord.objects.create)(
            profile_id=self.profile,
            media_type="movie",
            media_id="550",
            progress=300,
            duration=8340,
        )

        communicator = self._connect("/ws/playback/movie/550/")
        await communicator.connect()

        started = await wait_for_event(communicator, "SESSION_STARTED")
        self.assertEqual(started["resume_seconds"], 300)

        source = await wait_for_event(communicator, "LOAD_SOURCE")
        self.assertEqual(source["resume_seconds"], 300)

        await communicator.send_json_to({"type": "PLAYER_MESSAGE", "data": "play"})
        seek = await wait_for_event(communicator, "SEEK_COMMANDS")
        self.assertEqual(len(seek["commands"]), 5)
        self.assertIn({"type": "seek", "time": 300}, seek["commands"])

        await communicator.disconnect()

    async def test_disconnect_flushes_progress(self):
        communicator = self._connect("/ws/playback/movie/550/")
        await communicator.connect()
        await wait_for_event(communicator, "LOAD_SOURCE")

        await communicator.send_json_to({
            "type": "PLAYER_MESSAGE",
            "data": {"type": "PLAYER_EVENT", "data": {"event": "timeupdate", "currentTime": 120, "duration": 8340}},
        })
        await communicator.disconnect()

        record = await database_sync_to_async(ProgressRecord.objects.get)(
            profile_id=self.profile,
            media_id="550",
        )
        self.assertAlmostEqual(record.progress, 120, delta=2)
        self.assertEqual(record.duration, 8340)

        summary = await database_sync_to_async(WatchSummary.objects.get)(
            profile_id=self.profile,
            media_id="550",
        )
        self.assertEqual(summary.status, WatchSummary.Status.WATCHING)
        self.assertEqual(summary.title, "Fight Club")

    async def test_paused_session_does_not_write(self):
        communicator = self._connect("/ws/playback/movie/550/")
        await communicator.connect()
        await wait_for_event(communicator, "LOAD_SOURCE")

        await communicator.send_json_to({
            "type": "PLAYER_MESSAGE",
            "data": {"event": "timeupdate", "currentTime": 120, "duration": 8340},
        })
        await communicator.send_json_to({"type": "PLAYER_MESSAGE", "data": "pause"})
        await communicator.disconnect()

        exists = await database_sync_to_async(
            ProgressRecord.objects.filter(profile_id=self.profile).exists
        )()
        self.assertFalse(exists)

    async def test_change_episode_saves_and_restarts(self):
        communicator = self._connect("/ws/playback/tv/1399/?season=1&episode=1")
        await communicator.connect()

        source = await wait_for_event(communicator, "LOAD_SOURCE")
        self.assertEqual(source["url"], "https://b.test/tv/1399/1/1")

        await communicator.send_json_to({
            "type": "PLAYER_MESSAGE",
            "data": {"event": "timeupdate", "currentTime": 600, "duration": 3000},
        })
        await communicator.send_json_to({"type": "CHANGE_EPISODE", "season": 1, "episode": 2})

        started = await wait_for_event(communicator, "SESSION_STARTED")
        self.assertEqual((started["season"], started["episode"]), (1, 2))
        self.assertEqual(started["resume_seconds"], 0)

        source = await wait_for_event(communicator, "LOAD_SOURCE")
        self.assertEqual(source["url"], "https://b.test/tv/1399/1/2")

        await communicator.disconnect()

        record = await database_sync_to_async(ProgressRecord.objects.get)(
            profile_id=self.profile,
            media_id="1399",
            season=1,
            episode=1,
        )
        self.assertAlmostEqual(record.progress, 600, delta=2)

        summary = await database_sync_to_async(WatchSummary.objects.get)(
            profile_id=self.profile,
            media_id="1399",
        )
        self.assertEqual((summary.last_season, summary.last_episode), (1, 1))

    async def test_near_completion_offers_next_episode(self):
        communicator = self._connect("/ws/playback/tv/1399/?season=1&episode=10")
        await communicator.connect()
        await wait_for_event(communicator, "LOAD_SOURCE")

        await communicator.send_json_to({
            "type": "PLAYER_MESSAGE",
            "data": {"event": "timeupdate", "currentTime": 2750, "duration": 3000},
        })

        event = await wait_for_event(communicator, "NEAR_COMPLETION")
        self.assertTrue(event["value"])
        self.assertEqual(
            event["next"],
            {"season": 2, "episode": 1, "path": "/tv/1399/watch?season=2&episode=1"},
        )

        await communicator.disconnect()

    async def test_tv_defaults_to_first_episode(self):
        communicator = self._connect("/ws/playback/tv/1399/", profile=False)
        await communicator.connect()

        started = await wait_for_event(communicator, "SESSION_STARTED")
        self.assertEqual((started["season"], started["episode"]), (1, 1))

        await communicator.disconnect()

    async def test_incomplete_episode_is_rejected(self):
        communicator = self._connect("/ws/playback/tv/1399/?season=2", profile=False)
        connected, code = await communicator.connect()

        self.assertFalse(connected)
        self.assertEqual(code, 4002)

    async def test_movie_past_threshold_is_completed_on_open(self):
        await database_sync_to_async(ProgressRecord.objects.create)(
            profile_id=self.profile,
            media_type="movie",
            media_id="550",
            progress=8000,
            duration=8340,
        )
        await database_sync_to_async(WatchSummary.objects.create)(
            profile_id=self.profile,
            media_type="movie",
            media_id="550",
            status=WatchSummary.Status.WATCHING,
        )

        communicator = self._connect("/ws/playback/movie/550/")
        await communicator.connect()
        await wait_for_event(communicator, "SESSION_STARTED")
        await communicator.disconnect()

        summary = await database_sync_to_async(WatchSummary.objects.get)(
            profile_id=self.profile,
            media_id="550",
        )
        self.assertEqual(summary.status, WatchSummary.Status.COMPLETED)
