from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProgressRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("profile_id", models.UUIDField(db_index=True)),
                ("media_id", models.CharField(max_length=255)),
                ("media_type", models.CharField(choices=[("movie", "Movie"), ("tv", "TV Show")], max_length=20)),
                ("season", models.PositiveIntegerField(default=0)),
                ("episode", models.PositiveIntegerField(default=0)),
                ("progress", models.FloatField(default=0.0)),
                ("duration", models.FloatField(default=0.0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="WatchSummary",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("profile_id", models.UUIDField(db_index=True)),
                ("media_id", models.CharField(max_length=255)),
                ("media_type", models.CharField(choices=[("movie", "Movie"), ("tv", "TV Show")], max_length=20)),
                ("title", models.CharField(blank=True, default="", max_length=255)),
                ("poster_path", models.CharField(blank=True, default="", max_length=255)),
                ("genres", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("watching", "Watching"),
                            ("completed", "Completed"),
                            ("dropped", "Dropped"),
                            ("plan_to_watch", "Plan to watch"),
                            ("none", "None"),
                        ],
                        db_index=True,
                        default="none",
                        max_length=20,
                    ),
                ),
                ("last_season", models.PositiveIntegerField(blank=True, null=True)),
                ("last_episode", models.PositiveIntegerField(blank=True, null=True)),
                ("progress", models.FloatField(default=0.0)),
                ("total_duration", models.FloatField(default=0.0)),
                ("is_favorite", models.BooleanField(default=False)),
                (
                    "vote",
                    models.CharField(
                        blank=True,
                        choices=[("like", "Like"), ("dislike", "Dislike")],
                        max_length=10,
                        null=True,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.AddConstraint(
            model_name="progressrecord",
            constraint=models.UniqueConstraint(
                fields=("profile_id", "media_type", "media_id", "season", "episode"),
                name="unique_progress_per_episode",
            ),
        ),
        migrations.AddConstraint(
            model_name="watchsummary",
            constraint=models.UniqueConstraint(
                fields=("profile_id", "media_type", "media_id"),
                name="unique_summary_per_title",
            ),
        ),
    ]
