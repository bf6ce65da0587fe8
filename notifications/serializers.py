from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    is_read = serializers.BooleanField(read_only=True)

    class Meta:
        model = Notification
        fields = [
            "id", "topic", "kind", "visitor", "title", "message", "payload",
            "sent", "is_read", "read_at", "created_at",
        ]
        read_only_fields = fields


class MarkReadSerializer(serializers.Serializer):
    """Either a list of ids or all=true."""
    notification_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    all = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if not attrs.get("all") and not attrs.get("notification_ids"):
            raise serializers.ValidationError("Provide notification_ids or all=true.")
        return attrs
