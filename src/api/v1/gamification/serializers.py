from rest_framework import serializers


class LeaderboardQuerySerializer(serializers.Serializer):
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
    year = serializers.IntegerField(required=False, min_value=2000, max_value=9999)
    department = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs.get("month") is not None and attrs.get("year") is None:
            raise serializers.ValidationError(
                {"year": ["year is required when month is given."]}
            )
        return attrs


class UserScoreSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    user_id = serializers.IntegerField()
    name = serializers.CharField()
    points = serializers.IntegerField()
    completed_requests = serializers.IntegerField()
    achievements = serializers.IntegerField()
