from django.urls import path
from .views import KioskConfigView

urlpatterns = [
    path("kiosk/", KioskConfigView.as_view(), name="kiosk_config"),
]
