"""
services.py
-----------
Kiosk configuration read from SystemSetting rows, falling back to
settings.VISITOR_DESK when a key has not been stored (or is unparsable).

The staff mobile app reads the kiosk location and the proximity radius from
here before allowing a check-in.
"""

import logging
from dataclasses import asdict, dataclass

from django.conf import settings
from django.db import transaction

from .models import SystemSetting

logger = logging.getLogger(__name__)

KIOSK_LATITUDE = "KIOSK_LATITUDE"
KIOSK_LONGITUDE = "KIOSK_LONGITUDE"
KIOSK_NAME = "KIOSK_NAME"
KIOSK_ADDRESS = "KIOSK_ADDRESS"
PROXIMITY_MAX_DISTANCE = "PROXIMITY_MAX_DISTANCE"


@dataclass(frozen=True)
class KioskConfig:
    latitude: float
    longitude: float
    name: str
    address: str
    proximity_distance: float

    def as_dict(self):
        return asdict(self)


def _default(key):
    return settings.VISITOR_DESK[key]


def get_setting(key, default=None):
    row = SystemSetting.objects.filter(key=key).first()
    if row is None:
        return default
    return row.value


def _get_float(key):
    default = float(_default(key))
    raw = get_setting(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring unparsable setting %s=%r, using default %s", key, raw, default)
        return default


def get_proximity_distance():
    """Configured check-in radius in meters; 0 means the gate is off."""
    return _get_float(PROXIMITY_MAX_DISTANCE)


def get_kiosk_config():
    return KioskConfig(
        latitude=_get_float(KIOSK_LATITUDE),
        longitude=_get_float(KIOSK_LONGITUDE),
        name=get_setting(KIOSK_NAME, _default(KIOSK_NAME)),
        address=get_setting(KIOSK_ADDRESS, _default(KIOSK_ADDRESS)),
        proximity_distance=get_proximity_distance(),
    )


@transaction.atomic
def update_kiosk_config(**values):
    """
    Upsert the provided kiosk keys. Accepts latitude, longitude, name,
    address and proximity_distance; missing keys keep their current value.
    """
    keys = {
        "latitude": KIOSK_LATITUDE,
        "longitude": KIOSK_LONGITUDE,
        "name": KIOSK_NAME,
        "address": KIOSK_ADDRESS,
        "proximity_distance": PROXIMITY_MAX_DISTANCE,
    }
    for field, value in values.items():
        if value is None or field not in keys:
            continue
        SystemSetting.objects.update_or_create(key=keys[field], defaults={"value": str(value)})
    config = get_kiosk_config()
    logger.info("Kiosk configuration updated: %s", config.as_dict())
    return config
