# notifications/views.py
#
# Purpose:
# - The caller's own notification feed (staff app, admin console).
# - Mark one, several or all notifications read.
#
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Notification
from .serializers import MarkReadSerializer, NotificationSerializer


class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    GET  /api/notifications/            ?unread=1 for unread only
    POST /api/notifications/mark-read/  { "notification_ids": [1, 2] } or { "all": true }
    """
    serializer_class = NotificationSerializer

    def get_queryset(self):
        qs = Notification.objects.filter(recipient=self.request.user)
        if self.request.query_params.get("unread") in ("1", "true"):
            qs = qs.filter(read_at__isnull=True)
        return qs

    @action(detail=False, methods=["post"], url_path="mark-read")
    def mark_read(self, request):
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        qs = Notification.objects.filter(recipient=request.user, read_at__isnull=True)
        if not serializer.validated_data.get("all"):
            qs = qs.filter(pk__in=serializer.validated_data["notification_ids"])
        updated = qs.update(read_at=timezone.now())
        unread = Notification.objects.filter(recipient=request.user, read_at__isnull=True).count()
        return Response({"marked": updated, "unread": unread}, status=status.HTTP_200_OK)
