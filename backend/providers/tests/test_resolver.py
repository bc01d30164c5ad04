from django.test import SimpleTestCase

from providers.base import StreamRequest
from providers.models import StreamProvider
from providers.resolver import build_candidates, build_provider_url, resolve_candidate
from .utils import make_provider

MOVIE = StreamRequest(media_id="550", media_type="movie")
EPISODE = StreamRequest(media_id="1399", media_type="tv", season=2, episode=3)


class PathFamilyTests(SimpleTestCase):
    def test_movie_url(self):
        provider = make_provider("x", host="https://x.test")
        self.assertEqual(
            build_provider_url(provider, MOVIE),
            "https://x.test/movie/550",
        )

    def test_tv_url(self):
        provider = make_provider("x", host="https://x.test")
        self.assertEqual(
            build_provider_url(provider, EPISODE),
            "https://x.test/tv/1399/2/3",
        )

    def test_missing_template_cannot_resolve(self):
        provider = make_provider("x", tv_path_template="")
        self.assertIsNone(build_provider_url(provider, EPISODE))

    def test_imdb_family_uses_alternate_id(self):
        provider = make_provider(
            "imdb",
            host="https://imdb.test",
            family=StreamProvider.Family.PATH_IMDB,
            movie_path_template="/embed/{id}",
        )
        request = StreamRequest(media_id="550", media_type="movie", alternate_id="tt0137523")
        self.assertEqual(build_provider_url(provider, request), "https://imdb.test/embed/tt0137523")

    def test_imdb_family_without_alternate_id(self):
        provider = make_provider("imdb", family=StreamProvider.Family.PATH_IMDB)
        self.assertIsNone(build_provider_url(provider, MOVIE))


class QueryFamilyTests(SimpleTestCase):
    def test_movie_with_configured_path(self):
        provider = make_provider(
            "y",
            host="https://y.test",
            family=StreamProvider.Family.QUERY_TMDB,
            movie_path_template="/embed",
        )
        self.assertEqual(build_provider_url(provider, MOVIE), "https://y.test/embed?tmdb=550")

    def test_tv_with_default_path(self):
        provider = make_provider(
            "q",
            host="https://q.test",
            family=StreamProvider.Family.QUERY_TMDB,
            movie_path_template="",
            tv_path_template="",
        )
        self.assertEqual(
            build_provider_url(provider, EPISODE),
            "https://q.test/embed/tv?tmdb=1399&season=2&episode=3",
        )

    def test_videoid_family(self):
        provider = make_provider(
            "v",
            host="https://v.test/api/",
            family=StreamProvider.Family.VIDEOID_TMDB,
        )
        self.assertEqual(
            build_provider_url(provider, MOVIE),
            "https://v.test/api/?video_id=550&tmdb=1",
        )
        self.assertEqual(
            build_provider_url(provider, EPISODE),
            "https://v.test/api/?video_id=1399&tmdb=1&s=2&e=3",
        )


class ResolverOptionTests(SimpleTestCase):
    def test_unknown_family_is_not_fatal(self):
        provider = make_provider("odd", family="carrier-pigeon")
        with self.assertLogs("providers.resolver", level="WARNING"):
            self.assertIsNone(build_provider_url(provider, MOVIE))

    def test_extra_params_are_merged(self):
        provider = make_provider("x", host="https://x.test", extra_params={"autoplay": "1"})
        self.assertEqual(build_provider_url(provider, MOVIE), "https://x.test/movie/550?autoplay=1")

    def test_extra_params_override_existing_keys(self):
        provider = make_provider(
            "y",
            host="https://y.test",
            family=StreamProvider.Family.QUERY_TMDB,
            movie_path_template="/embed",
            extra_params={"tmdb": "override", "lang": "it"},
        )
        self.assertEqual(
            build_provider_url(provider, MOVIE),
            "https://y.test/embed?tmdb=override&lang=it",
        )

    def test_resume_param_appended_with_question_mark(self):
        provider = make_provider("x", host="https://x.test", supports_resume=True, resume_param="t")
        url = build_provider_url(provider, MOVIE, 125)
        self.assertEqual(url, "https://x.test/movie/550?t=125")
        self.assertEqual(url.count("t=125"), 1)

    def test_resume_param_appended_with_ampersand(self):
        provider = make_provider(
            "y",
            host="https://y.test",
            family=StreamProvider.Family.QUERY_TMDB,
            movie_path_template="/embed",
            supports_resume=True,
            resume_param="t",
        )
        self.assertEqual(
            build_provider_url(provider, MOVIE, 125.8),
            "https://y.test/embed?tmdb=550&t=125",
        )

    def test_resume_ignored_without_support(self):
        provider = make_provider("x", host="https://x.test", supports_resume=False, resume_param="t")
        self.assertEqual(build_provider_url(provider, MOVIE, 125), "https://x.test/movie/550")

    def test_zero_resume_adds_nothing(self):
        provider = make_provider("x", host="https://x.test", supports_resume=True, resume_param="t")
        self.assertEqual(build_provider_url(provider, MOVIE, 0), "https://x.test/movie/550")

    def test_resolution_is_deterministic(self):
        providers = [
            make_provider("x", host="https://x.test", extra_params={"b": "2", "a": "1"}),
            make_provider("y", family=StreamProvider.Family.QUERY_TMDB, supports_resume=True, resume_param="t"),
            make_provider("v", family=StreamProvider.Family.VIDEOID_TMDB),
        ]
        for provider in providers:
            for request in (MOVIE, EPISODE):
                self.assertEqual(
                    build_provider_url(provider, request, 61.5),
                    build_provider_url(provider, request, 61.5),
                )


class CandidateTests(SimpleTestCase):
    def test_candidate_carries_provenance(self):
        provider = make_provider("x", name="Server X", supports_resume=True, resume_param="t")
        candidate = resolve_candidate(provider, MOVIE, 30)
        self.assertEqual(candidate.key, "x")
        self.assertEqual(candidate.name, "Server X")
        self.assertTrue(candidate.supports_resume)
        self.assertEqual(candidate.resume_param, "t")
        self.assertTrue(candidate.url.endswith("?t=30"))

    def test_unresolvable_providers_are_excluded(self):
        providers = [
            make_provider("a", tv_path_template=""),
            make_provider("b"),
        ]
        candidates = build_candidates(providers, EPISODE)
        self.assertEqual([c.key for c in candidates], ["b"])
