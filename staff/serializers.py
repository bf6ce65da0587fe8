from rest_framework import serializers

from .models import StaffProfile, StaffSlot
from .services.work_order_queue import SlotUpdate


class StaffProfileSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(source="user.id", read_only=True)
    org_path = serializers.CharField(read_only=True)

    class Meta:
        model = StaffProfile
        fields = [
            "user_id",
            "name",
            "phone",
            "role",
            "division",
            "headquarters",
            "team",
            "position",
            "org_path",
            "is_working",
            "last_check_in",
            "last_check_out",
        ]
        read_only_fields = fields


class StaffSlotSerializer(serializers.ModelSerializer):
    staff_name = serializers.SerializerMethodField()
    org_path = serializers.SerializerMethodField()

    class Meta:
        model = StaffSlot
        fields = [
            "id",
            "staff",
            "staff_name",
            "org_path",
            "rank",
            "active",
            "current_load",
            "capacity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _profile(self, obj):
        return getattr(obj.staff, "staff_profile", None)

    def get_staff_name(self, obj):
        profile = self._profile(obj)
        return profile.name if profile else obj.staff.get_username()

    def get_org_path(self, obj):
        profile = self._profile(obj)
        return profile.org_path if profile else None


class SlotCreateSerializer(serializers.Serializer):
    staff = serializers.IntegerField()
    rank = serializers.IntegerField(min_value=1)
    capacity = serializers.IntegerField(min_value=1, required=False)


class SlotUpdateSerializer(serializers.Serializer):
    """Partial slot change; every field is optional."""
    rank = serializers.IntegerField(min_value=1, required=False)
    active = serializers.BooleanField(required=False)
    capacity = serializers.IntegerField(min_value=1, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one of rank, active, capacity.")
        return attrs

    def to_command(self):
        return SlotUpdate(**self.validated_data)


class BulkRotationSerializer(serializers.Serializer):
    staff_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class CheckInSerializer(serializers.Serializer):
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)

    def validate(self, attrs):
        lat = attrs.get("latitude")
        lng = attrs.get("longitude")
        if (lat is None) != (lng is None):
            raise serializers.ValidationError("Send both latitude and longitude, or neither.")
        return attrs
