# reports/views.py

from django.contrib.auth import get_user_model
from django.db.models import Count
from django.db.models.functions import TruncDate
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from staff.permissions import IsAdminOrManager
from staff.serializers import StaffProfileSerializer
from staff.services import attendance
from staff.services.directory import display_name
from staff.services.work_order_queue import WorkOrderQueue
from visitors.models import Visitor


class ReportsView(APIView):
    """
    GET /api/reports/summary

    Returns JSON with:
    - visitors_per_day: [{ "day": "YYYY-MM-DD", "count": N }, ...]  (last 30 days)
    - by_kind:   { "walkin": N, "returning": N, "reserved": N }
    - by_status: { "waiting": N, "meeting": N, "completed": N }
    - top_staff: [{ "staff_id": X, "staff_name": "...", "count": N }, ...]
    - rotation:  [{ "rank": 1, "staff_id": X, "staff_name": "...", "current_load": N, "capacity": N }, ...]
    - unassigned: visits in the window nobody was assigned to

    Admins and managers only.
    """
    permission_classes = [IsAdminOrManager]

    def get(self, request):
        # Look back 30 days from now
        start = timezone.now() - timezone.timedelta(days=30)
        recent = Visitor.objects.filter(visited_at__gte=start)

        per_day = (
            recent.annotate(day=TruncDate("visited_at"))
            .values("day")
            .annotate(count=Count("id"))
            .order_by("day")
        )

        by_kind = {key: 0 for key, _label in Visitor.KIND_CHOICES}
        for row in recent.values("kind").annotate(count=Count("id")):
            by_kind[row["kind"]] = row["count"]

        by_status = {key: 0 for key, _label in Visitor.STATUS_CHOICES}
        for row in recent.values("status").annotate(count=Count("id")):
            by_status[row["status"]] = row["count"]

        # Top staff by visitors assigned (last 30 days), top 5
        top_staff = list(
            recent.filter(assigned_staff__isnull=False)
            .values("assigned_staff")
            .annotate(count=Count("id"))
            .order_by("-count", "assigned_staff")[:5]
        )
        users = get_user_model().objects.select_related("staff_profile").in_bulk(
            [row["assigned_staff"] for row in top_staff]
        )
        top_staff_named = [
            {
                "staff_id": row["assigned_staff"],
                "staff_name": display_name(users[row["assigned_staff"]]) if row["assigned_staff"] in users else None,
                "count": row["count"],
            }
            for row in top_staff
        ]

        rotation = [
            {
                "rank": slot.rank,
                "staff_id": slot.staff_id,
                "staff_name": display_name(slot.staff),
                "current_load": slot.current_load,
                "capacity": slot.capacity,
            }
            for slot in WorkOrderQueue().active_slots().select_related("staff__staff_profile")
        ]

        data = {
            "visitors_per_day": [
                {"day": row["day"].isoformat(), "count": row["count"]} for row in per_day
            ],
            "by_kind": by_kind,
            "by_status": by_status,
            "top_staff": top_staff_named,
            "rotation": rotation,
            "unassigned": recent.filter(assigned_staff__isnull=True).count(),
        }
        return Response(data)


class AttendanceReportView(APIView):
    """
    GET /api/reports/attendance?division=&headquarters=&team=&date=YYYY-MM-DD

    Who is working right now, narrowed by org unit. date limits the list to
    staff who checked in on that day.
    """
    permission_classes = [IsAdminOrManager]

    def get(self, request):
        params = request.query_params
        day = None
        if params.get("date"):
            try:
                day = parse_date(params["date"])
            except ValueError:
                day = None
            if day is None:
                raise ValidationError({"date": ["Use YYYY-MM-DD."]})
        summary = attendance.attendance_summary(
            division=params.get("division"),
            headquarters=params.get("headquarters"),
            team=params.get("team"),
            date=day,
        )
        summary["staff"] = StaffProfileSerializer(summary["staff"], many=True).data
        return Response(summary)
