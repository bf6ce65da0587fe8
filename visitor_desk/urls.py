# visitor_desk/urls.py
#
# Purpose:
# - Project URL router.
# - Every JSON API lives under /api/ so the Django admin keeps its own space.
#
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from staff import auth_views


urlpatterns = [
    # Django admin
    path("admin/", admin.site.urls),

    # =====
    # API's
    # =====
    # Token login for the kiosk and the staff mobile app
    path("api/auth/login", auth_views.StaffLoginView.as_view(), name="auth_login"),
    path("api/auth/logout", auth_views.StaffLogoutView.as_view(), name="auth_logout"),

    path("api/", include("visitors.urls")),
    path("api/staff/", include("staff.urls")),
    path("api/notifications/", include("notifications.urls")),
    path("api/config/", include("configmgr.urls")),
    path("api/reports/", include("reports.urls")),
]

# Static files in DEBUG (dev only). In production, serve via web server / CDN.
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
