from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from providers.base import StreamRequest
from providers.liveness import probe_url
from providers.ranking import get_ranked_providers
from providers.resolver import build_candidates


class Command(BaseCommand):
    help = "Print the ranked embed URLs the player would try for a title"

    def add_arguments(self, parser):
        parser.add_argument("media_type", choices=["movie", "tv"])
        parser.add_argument("media_id")
        parser.add_argument("--season", type=int)
        parser.add_argument("--episode", type=int)
        parser.add_argument("--imdb", dest="alternate_id")
        parser.add_argument("--resume", type=float, default=0)
        parser.add_argument(
            "--probe",
            action="store_true",
            help="Run the liveness probe against every candidate",
        )

    def handle(self, *args, **options):
        try:
            request = StreamRequest(
                media_id=options["media_id"],
                media_type=options["media_type"],
                season=options["season"],
                episode=options["episode"],
                alternate_id=options["alternate_id"],
            )
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        providers = get_ranked_providers(request.media_type)
        candidates = build_candidates(providers, request, options["resume"])

        if not candidates:
            self.stdout.write(self.style.WARNING("No provider can serve this title"))
            return

        for position, candidate in enumerate(candidates, start=1):
            line = f"{position}. [{candidate.key}] {candidate.url}"
            if options["probe"]:
                available = async_to_sync(probe_url)(candidate.url)
                line += " (up)" if available else " (not found)"
            self.stdout.write(line)

        self.stdout.write(
            self.style.SUCCESS(f"Resolved {len(candidates)} candidate(s)")
        )
