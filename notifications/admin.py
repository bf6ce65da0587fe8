from django.contrib import admin
from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("recipient", "kind", "topic", "title", "sent", "read_at", "created_at")
    list_filter = ("kind", "topic", "sent", "created_at")
    search_fields = ("recipient__username", "title", "message")
