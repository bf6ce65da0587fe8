from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import CheckInView, CheckOutView, StaffDirectoryViewSet, StaffSlotViewSet

router = DefaultRouter()
router.register(r"slots", StaffSlotViewSet, basename="staff-slot")
router.register(r"directory", StaffDirectoryViewSet, basename="staff-directory")

urlpatterns = [
    path("", include(router.urls)),
    path("attendance/check-in/", CheckInView.as_view(), name="staff_check_in"),
    path("attendance/check-out/", CheckOutView.as_view(), name="staff_check_out"),
]
