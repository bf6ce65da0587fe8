# staff/views.py
#
# Purpose:
# - Work-order rotation API (list, insert, update, bulk replace, next, release).
# - Staff directory listing for admins/managers.
# - Attendance check-in / check-out for the mobile app (proximity gated).
#
# Permissions:
# - Any authenticated caller can read the rotation.
# - Every rotation write requires the admin role.
#
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import StaffProfile, StaffSlot
from .permissions import IsAdminOrManager, IsAdminOrReadOnly, is_admin
from .serializers import (
    BulkRotationSerializer,
    CheckInSerializer,
    SlotCreateSerializer,
    SlotUpdateSerializer,
    StaffProfileSerializer,
    StaffSlotSerializer,
)
from .services import attendance
from .services.work_order_queue import WorkOrderQueue


class StaffSlotViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Endpoints:
    - GET    /api/staff/slots/                    active rotation in rank order
    - POST   /api/staff/slots/                    insert one slot
    - PATCH  /api/staff/slots/{id}/               update rank/active/capacity
    - POST   /api/staff/slots/bulk/               replace the whole rotation
    - GET    /api/staff/slots/next/               who gets the next walk-in
    - POST   /api/staff/slots/{id}/deactivate/
    - POST   /api/staff/slots/{id}/reactivate/
    - POST   /api/staff/slots/{id}/release/       give back one unit of load

    Slots are never deleted here; deactivate keeps the history.
    """
    serializer_class = StaffSlotSerializer
    permission_classes = [IsAdminOrReadOnly]
    pagination_class = None
    queue = WorkOrderQueue()

    def get_queryset(self):
        qs = StaffSlot.objects.select_related("staff__staff_profile").order_by("rank", "id")
        include_inactive = self.request.query_params.get("include_inactive") in ("1", "true")
        if self.action == "list" and not (include_inactive and is_admin(self.request.user)):
            qs = qs.filter(active=True)
        return qs

    def _slot_response(self, slot, status_code=status.HTTP_200_OK):
        return Response(StaffSlotSerializer(slot).data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = SlotCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        slot = self.queue.insert_slot(
            staff_id=data["staff"],
            rank=data["rank"],
            capacity=data.get("capacity"),
        )
        return self._slot_response(slot, status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = SlotUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slot = self.queue.update_slot(pk, serializer.to_command())
        return self._slot_response(slot)

    @action(detail=False, methods=["post"])
    def bulk(self, request):
        serializer = BulkRotationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slots = self.queue.replace_all(serializer.validated_data["staff_ids"])
        return Response(
            {"slots": StaffSlotSerializer(slots, many=True).data, "total": len(slots)},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"])
    def next(self, request):
        slot = self.queue.next_available()
        if slot is None:
            return Response({"detail": "No staff available."}, status=status.HTTP_404_NOT_FOUND)
        return self._slot_response(slot)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        return self._slot_response(self.queue.deactivate(pk))

    @action(detail=True, methods=["post"])
    def reactivate(self, request, pk=None):
        return self._slot_response(self.queue.reactivate(pk))

    @action(detail=True, methods=["post"])
    def release(self, request, pk=None):
        return self._slot_response(self.queue.release(pk))


class StaffDirectoryViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/staff/directory/?role=&division=&headquarters=&team=
    """
    serializer_class = StaffProfileSerializer
    permission_classes = [IsAdminOrManager]

    def get_queryset(self):
        qs = StaffProfile.objects.select_related("user")
        for field in ("role", "division", "headquarters", "team"):
            value = (self.request.query_params.get(field) or "").strip()
            if value:
                qs = qs.filter(**{field: value})
        return qs.order_by("division", "headquarters", "team", "name")


class CheckInView(APIView):
    """
    POST /api/staff/attendance/check-in/
    { "latitude": 37.5665, "longitude": 126.9780 }   (optional unless gated)
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = CheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile, result = attendance.check_in(
            request.user,
            latitude=serializer.validated_data.get("latitude"),
            longitude=serializer.validated_data.get("longitude"),
        )
        body = {
            "detail": "Checked in.",
            "check_in_time": profile.last_check_in,
            "is_working": profile.is_working,
        }
        if result is not None:
            body["proximity"] = {
                "distance_meters": round(result.distance_meters, 1),
                "max_distance": result.max_distance,
                "passed": result.passed,
                "message": result.message,
            }
        return Response(body, status=status.HTTP_200_OK)


class CheckOutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        profile = attendance.check_out(request.user)
        return Response(
            {
                "detail": "Checked out.",
                "check_out_time": profile.last_check_out,
                "is_working": profile.is_working,
            },
            status=status.HTTP_200_OK,
        )
