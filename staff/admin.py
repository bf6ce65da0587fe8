# staff/admin.py
from django.contrib import admin
from .models import StaffProfile, StaffSlot


@admin.register(StaffProfile)
class StaffProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "role", "division", "headquarters", "team", "position", "is_working")
    list_filter = ("role", "division", "headquarters", "is_working")
    search_fields = ("name", "user__username", "phone")


@admin.register(StaffSlot)
class StaffSlotAdmin(admin.ModelAdmin):
    list_display = ("rank", "staff", "active", "current_load", "capacity", "updated_at")
    list_filter = ("active",)
    search_fields = ("staff__username", "staff__staff_profile__name")
    # Load is owned by the queue; edit it through release, not by hand.
    readonly_fields = ("current_load",)
