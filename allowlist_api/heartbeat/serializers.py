from rest_framework import serializers


class HealthSerializer(serializers.Serializer):
    success = serializers.BooleanField(read_only=True)
    message = serializers.CharField(read_only=True)
    timestamp = serializers.DateTimeField(read_only=True)
    environment = serializers.CharField(read_only=True)
