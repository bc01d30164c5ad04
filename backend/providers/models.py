from django.core.exceptions import ValidationError
from django.db import models


class MediaType(models.TextChoices):
    MOVIE = "movie", "Movie"
    TV = "tv", "TV Show"


class StreamProvider(models.Model):
    class Family(models.TextChoices):
        PATH_TMDB = "path-tmdb", "Path TMDB"
        PATH_IMDB = "path-imdb", "Path IMDB"
        QUERY_TMDB = "query-tmdb", "Query TMDB"
        VIDEOID_TMDB = "videoid-tmdb", "Video ID TMDB"

    key = models.SlugField(max_length=50, unique=True)
    name = models.CharField(max_length=100)
    host = models.URLField(max_length=255)

    family = models.CharField(
        max_length=20,
        choices=Family.choices,
        default=Family.PATH_TMDB,
    )

    movie_path_template = models.CharField(
        max_length=255,
        blank=True,
        default="/movie/{id}",
    )
    tv_path_template = models.CharField(
        max_length=255,
        blank=True,
        default="/tv/{id}/{season}/{episode}",
    )
    extra_params = models.JSONField(default=dict, blank=True)

    # Lower values are tried first.
    priority = models.PositiveIntegerField(default=50, db_index=True)

    supports_movies = models.BooleanField(default=True)
    supports_tv = models.BooleanField(default=True)
    requires_imdb = models.BooleanField(default=False)
    supports_resume = models.BooleanField(default=False)
    resume_param = models.CharField(max_length=50, null=True, blank=True)

    # Health fields are written by the external monitor service only.
    is_active = models.BooleanField(default=True)
    is_healthy = models.BooleanField(default=True)
    consecutive_failures = models.PositiveIntegerField(default=0)
    last_latency_ms = models.PositiveIntegerField(null=True, blank=True)
    success_rate_24h = models.FloatField(null=True, blank=True)
    last_failure_reason = models.TextField(blank=True, default="")
    last_check_at = models.DateTimeField(null=True, blank=True)
    last_success_at = models.DateTimeField(null=True, blank=True)

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    HEALTH_FIELDS = (
        "is_healthy",
        "consecutive_failures",
        "last_latency_ms",
        "success_rate_24h",
        "last_failure_reason",
        "last_check_at",
        "last_success_at",
    )

    class Meta:
        ordering = ["priority", "id"]

    def clean(self):
        super().clean()
        if self.supports_resume and not self.resume_param:
            raise ValidationError(
                {"resume_param": "Resume-capable providers need a resume parameter."}
            )

    def supports(self, media_type: str) -> bool:
        if media_type == MediaType.MOVIE:
            return self.supports_movies
        if media_type == MediaType.TV:
            return self.supports_tv
        return False

    def __str__(self):
        return f"{self.name} ({self.key})"
