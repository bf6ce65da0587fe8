# visitors/views.py
#
# Purpose:
# - Kiosk: register a visit, look up a previous visit (public, no login on
#   the kiosk device).
# - Admin: pre-book reservations, browse visits by date / status / kind.
# - Staff app: confirm an assigned visitor, complete the visit.
#
# Permissions:
# - register/search: anyone.
# - reservations: admin role.
# - list/retrieve: admins and managers see every visit, other staff only the
#   visitors assigned to them.
# - confirm: the assigned staff member. complete: admin or assigned staff.
#
from django.utils.dateparse import parse_date
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from staff.models import StaffProfile
from staff.permissions import IsAdminRole, get_role

from .models import Visitor
from .serializers import (
    ConfirmSerializer,
    ReservationCreateSerializer,
    VisitorLookupSerializer,
    VisitorRegistrationSerializer,
    VisitorSearchSerializer,
    VisitorSerializer,
)
from .services.assignment_service import AssignmentService, find_previous_visit


class VisitorViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Endpoints:
    - POST /api/visitors/register/        kiosk registration
    - GET  /api/visitors/search/          ?name=&phone= most recent visit
    - POST /api/visitors/reservations/    admin pre-booking
    - POST /api/visitors/{id}/confirm/    { "status": "meeting" | "completed" }
    - POST /api/visitors/{id}/complete/
    - GET  /api/visitors/                 ?date=YYYY-MM-DD&status=&kind=
    - GET  /api/visitors/{id}/
    """
    serializer_class = VisitorSerializer
    service = AssignmentService()

    def get_permissions(self):
        if self.action in ("register", "search"):
            return [AllowAny()]
        if self.action == "reservations":
            return [IsAdminRole()]
        return [IsAuthenticated()]

    def get_queryset(self):
        qs = Visitor.objects.select_related(
            "assigned_staff__staff_profile", "reservation"
        ).order_by("-visited_at", "-id")

        user = self.request.user
        if get_role(user) not in (StaffProfile.ROLE_ADMIN, StaffProfile.ROLE_MANAGER):
            qs = qs.filter(assigned_staff=user)

        params = self.request.query_params
        day = params.get("date")
        if day:
            try:
                parsed = parse_date(day)
            except ValueError:
                parsed = None
            if parsed is None:
                raise ValidationError({"date": ["Use YYYY-MM-DD."]})
            qs = qs.filter(visited_at__date=parsed)
        if params.get("status"):
            qs = qs.filter(status=params["status"])
        if params.get("kind"):
            qs = qs.filter(kind=params["kind"])
        return qs

    def _visitor_response(self, visitor, status_code=status.HTTP_200_OK):
        return Response(VisitorSerializer(visitor).data, status=status_code)

    @action(detail=False, methods=["post"])
    def register(self, request):
        serializer = VisitorRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        visitor = self.service.register_visitor(serializer.validated_data)
        return self._visitor_response(visitor, status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def search(self, request):
        serializer = VisitorSearchSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        visitor = find_previous_visit(**serializer.validated_data)
        if visitor is None:
            return Response({"detail": "No visit found for that name and phone."}, status=status.HTTP_404_NOT_FOUND)
        return Response(VisitorLookupSerializer(visitor).data)

    @action(detail=False, methods=["post"])
    def reservations(self, request):
        serializer = ReservationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        visitor = self.service.register_reservation(serializer.validated_data, request.user)
        return self._visitor_response(visitor, status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):
        serializer = ConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        visitor = self.service.confirm_visitor(pk, request.user, serializer.validated_data.get("status"))
        return self._visitor_response(visitor)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        visitor = self.service.complete_visitor(pk, request.user)
        return self._visitor_response(visitor)
