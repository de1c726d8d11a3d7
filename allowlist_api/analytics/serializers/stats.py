from rest_framework import serializers


class AllowlistStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField(min_value=0, read_only=True)
    byRole = serializers.DictField(
        source='by_role', child=serializers.IntegerField(min_value=0), read_only=True)


class AllowlistStatsResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(read_only=True)
    data = AllowlistStatsSerializer(read_only=True)
