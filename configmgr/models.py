from django.db import models


class SystemSetting(models.Model):
    """
    Simple key/value settings store.
    Example keys:
      - KIOSK_LATITUDE / KIOSK_LONGITUDE (e.g., '37.5665' / '126.9780')
      - PROXIMITY_MAX_DISTANCE (meters, '0' disables the check-in gate)
    """
    key = models.CharField(max_length=100, unique=True)
    value = models.CharField(max_length=200)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.key}={self.value}"
