from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StreamProvider",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.SlugField(unique=True)),
                ("name", models.CharField(max_length=100)),
                ("host", models.URLField(max_length=255)),
                (
                    "family",
                    models.CharField(
                        choices=[
                            ("path-tmdb", "Path TMDB"),
                            ("path-imdb", "Path IMDB"),
                            ("query-tmdb", "Query TMDB"),
                            ("videoid-tmdb", "Video ID TMDB"),
                        ],
                        default="path-tmdb",
                        max_length=20,
                    ),
                ),
                ("movie_path_template", models.CharField(blank=True, default="/movie/{id}", max_length=255)),
                ("tv_path_template", models.CharField(blank=True, default="/tv/{id}/{season}/{episode}", max_length=255)),
                ("extra_params", models.JSONField(blank=True, default=dict)),
                ("priority", models.PositiveIntegerField(db_index=True, default=50)),
                ("supports_movies", models.BooleanField(default=True)),
                ("supports_tv", models.BooleanField(default=True)),
                ("requires_imdb", models.BooleanField(default=False)),
                ("supports_resume", models.BooleanField(default=False)),
                ("resume_param", models.CharField(blank=True, max_length=50, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("is_healthy", models.BooleanField(default=True)),
                ("consecutive_failures", models.PositiveIntegerField(default=0)),
                ("last_latency_ms", models.PositiveIntegerField(blank=True, null=True)),
                ("success_rate_24h", models.FloatField(blank=True, null=True)),
                ("last_failure_reason", models.TextField(blank=True, default="")),
                ("last_check_at", models.DateTimeField(blank=True, null=True)),
                ("last_success_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["priority", "id"],
            },
        ),
    ]
