from rest_framework import serializers

from staff.services.directory import display_name

from .models import Reservation, Visitor, normalize_phone


def _validate_phone(value):
    if not normalize_phone(value):
        raise serializers.ValidationError("Phone must contain digits.")
    return value.strip()


class ReservationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Reservation
        fields = ["division", "headquarters", "team", "staff_name", "position", "expected_visit_time"]
        read_only_fields = fields


class AssignedStaffMixin(serializers.Serializer):
    assigned_staff_name = serializers.SerializerMethodField()
    assigned_staff_org = serializers.SerializerMethodField()

    def get_assigned_staff_name(self, obj):
        return display_name(obj.assigned_staff) if obj.assigned_staff_id else None

    def get_assigned_staff_org(self, obj):
        profile = getattr(obj.assigned_staff, "staff_profile", None) if obj.assigned_staff_id else None
        return profile.org_path if profile else None


class VisitorSerializer(AssignedStaffMixin, serializers.ModelSerializer):
    reservation = ReservationSerializer(read_only=True)

    class Meta:
        model = Visitor
        fields = [
            "id",
            "name",
            "phone",
            "has_reservation",
            "kind",
            "status",
            "assigned_staff",
            "assigned_staff_name",
            "assigned_staff_org",
            "previous_visit",
            "notification_sent",
            "notification_confirmed",
            "city",
            "district",
            "gender",
            "age_group",
            "reservation",
            "visited_at",
            "confirmed_at",
            "completed_at",
        ]
        read_only_fields = fields


class VisitorLookupSerializer(AssignedStaffMixin, serializers.ModelSerializer):
    """What the public kiosk search may show: no phone, no questionnaire."""

    class Meta:
        model = Visitor
        fields = [
            "id",
            "name",
            "has_reservation",
            "kind",
            "status",
            "assigned_staff_name",
            "assigned_staff_org",
            "visited_at",
        ]
        read_only_fields = fields


class VisitorRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20)
    has_reservation = serializers.BooleanField(required=False, default=False)
    city = serializers.CharField(max_length=50, required=False, allow_blank=True)
    district = serializers.CharField(max_length=50, required=False, allow_blank=True)
    gender = serializers.CharField(max_length=10, required=False, allow_blank=True)
    age_group = serializers.CharField(max_length=10, required=False, allow_blank=True)

    def validate_phone(self, value):
        return _validate_phone(value)


class ReservationCreateSerializer(VisitorRegistrationSerializer):
    division = serializers.CharField(max_length=100)
    headquarters = serializers.CharField(max_length=100)
    team = serializers.CharField(max_length=100)
    staff_name = serializers.CharField(max_length=100)
    position = serializers.CharField(max_length=100, required=False, allow_blank=True)
    expected_visit_time = serializers.DateTimeField(required=False, allow_null=True)


class VisitorSearchSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20)

    def validate_phone(self, value):
        return _validate_phone(value)


class ConfirmSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[Visitor.STATUS_MEETING, Visitor.STATUS_COMPLETED],
        required=False,
        allow_null=True,
    )
