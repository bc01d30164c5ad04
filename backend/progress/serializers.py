from rest_framework import serializers

from .models import WatchSummary


class WatchSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = WatchSummary
        fields = [
            "media_id",
            "media_type",
            "title",
            "status",
            "last_season",
            "last_episode",
            "progress",
            "total_duration",
            "updated_at",
        ]
        read_only_fields = fields


class StreamRequestQuerySerializer(serializers.Serializer):
    profile = serializers.UUIDField(required=False)
    media_id = serializers.CharField()
    media_type = serializers.ChoiceField(choices=["movie", "tv"])
    season = serializers.IntegerField(required=False, min_value=0)
    episode = serializers.IntegerField(required=False, min_value=0)
    imdb_id = serializers.CharField(required=False)


class CompleteMovieSerializer(serializers.Serializer):
    profile = serializers.UUIDField()
    media_id = serializers.CharField()
