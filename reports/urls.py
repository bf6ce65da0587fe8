# reports/urls.py

from django.urls import path
from .views import AttendanceReportView, ReportsView

urlpatterns = [
    path("summary", ReportsView.as_view(), name="reports_summary"),
    path("attendance", AttendanceReportView.as_view(), name="reports_attendance"),
]
