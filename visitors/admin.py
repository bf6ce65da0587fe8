# visitors/admin.py
from django.contrib import admin
from .models import Reservation, Visitor


class ReservationInline(admin.StackedInline):
    model = Reservation
    extra = 0
    can_delete = False


@admin.register(Visitor)
class VisitorAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "kind", "status", "assigned_staff", "notification_sent", "visited_at")
    list_filter = ("kind", "status", "has_reservation", "visited_at")
    search_fields = ("name", "phone", "assigned_staff__staff_profile__name")
    readonly_fields = ("name_key", "phone_key", "slot", "previous_visit", "has_reservation")
    inlines = [ReservationInline]
