from django.db import models

from providers.models import MediaType

# Movies are stored under a fixed (0, 0) episode key so a single unique
# constraint covers both kinds.
MOVIE_EPISODE_KEY = (0, 0)

COMPLETION_RATIO = 0.9


class ProgressRecord(models.Model):
    profile_id = models.UUIDField(db_index=True)

    media_id = models.CharField(max_length=255)
    media_type = models.CharField(max_length=20, choices=MediaType.choices)

    season = models.PositiveIntegerField(default=0)
    episode = models.PositiveIntegerField(default=0)

    progress = models.FloatField(default=0.0)  # seconds
    duration = models.FloatField(default=0.0)  # seconds

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["profile_id", "media_type", "media_id", "season", "episode"],
                name="unique_progress_per_episode",
            ),
        ]

    @property
    def ratio(self) -> float:
        if not self.duration:
            return 0.0
        return self.progress / self.duration

    def __str__(self):
        if self.media_type == MediaType.TV:
            return f"{self.profile_id} - {self.media_id} S{self.season}E{self.episode}"
        return f"{self.profile_id} - {self.media_id}"


class WatchSummary(models.Model):
    class Status(models.TextChoices):
        WATCHING = "watching", "Watching"
        COMPLETED = "completed", "Completed"
        DROPPED = "dropped", "Dropped"
        PLANNED = "plan_to_watch", "Plan to watch"
        NONE = "none", "None"

    class Vote(models.TextChoices):
        LIKE = "like", "Like"
        DISLIKE = "dislike", "Dislike"

    # Statuses a progress write must not overwrite.
    STICKY_STATUSES = {Status.COMPLETED, Status.DROPPED}

    profile_id = models.UUIDField(db_index=True)

    media_id = models.CharField(max_length=255)
    media_type = models.CharField(max_length=20, choices=MediaType.choices)

    title = models.CharField(max_length=255, blank=True, default="")
    poster_path = models.CharField(max_length=255, blank=True, default="")
    genres = models.JSONField(default=list, blank=True)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.NONE,
        db_index=True,
    )

    last_season = models.PositiveIntegerField(null=True, blank=True)
    last_episode = models.PositiveIntegerField(null=True, blank=True)

    progress = models.FloatField(default=0.0)
    total_duration = models.FloatField(default=0.0)

    is_favorite = models.BooleanField(default=False)
    vote = models.CharField(
        max_length=10,
        choices=Vote.choices,
        null=True,
        blank=True,
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["profile_id", "media_type", "media_id"],
                name="unique_summary_per_title",
            ),
        ]

    def __str__(self):
        return f"{self.profile_id} - {self.media_id} ({self.status})"
