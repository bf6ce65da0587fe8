"""
attendance.py
-------------
Staff check-in / check-out from the mobile app.

Check-in is gated by the kiosk proximity radius from configmgr:
- radius 0: no gate; coordinates are stored when sent.
- radius > 0: coordinates are required and must be within the radius.
"""

import logging
from typing import Optional, Tuple

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from configmgr.services import get_kiosk_config
from ..models import StaffProfile
from . import proximity

logger = logging.getLogger(__name__)


def _profile_for(user) -> StaffProfile:
    try:
        return StaffProfile.objects.select_for_update().get(user=user)
    except StaffProfile.DoesNotExist:
        raise NotFound("Staff profile not found.")


def check_proximity(latitude, longitude) -> Optional[proximity.ProximityCheckResult]:
    """
    Run the configured geofence check for a reported position.
    Returns None when the gate is off and no position was reported.
    """
    config = get_kiosk_config()
    max_distance = config.proximity_distance
    has_position = latitude is not None and longitude is not None

    if not has_position:
        if max_distance > 0:
            raise ValidationError({"detail": "Location is required to check in."})
        return None

    return proximity.evaluate(
        proximity.Coordinates(float(latitude), float(longitude)),
        proximity.Coordinates(config.latitude, config.longitude),
        max_distance,
    )


@transaction.atomic
def check_in(user, latitude=None, longitude=None) -> Tuple[StaffProfile, Optional[proximity.ProximityCheckResult]]:
    """Validate the position (if gated) and mark the staff member as working."""
    profile = _profile_for(user)
    result = check_proximity(latitude, longitude)
    if result is not None and not result.passed:
        logger.info(
            "Check-in rejected for user %s: %.0f m > %.0f m",
            user.pk, result.distance_meters, result.max_distance,
        )
        raise ValidationError({"detail": result.message})

    now = timezone.now()
    profile.is_working = True
    profile.last_check_in = now
    fields = ["is_working", "last_check_in"]
    if latitude is not None and longitude is not None:
        profile.latitude = float(latitude)
        profile.longitude = float(longitude)
        profile.location_updated_at = now
        fields += ["latitude", "longitude", "location_updated_at"]
    profile.save(update_fields=fields)
    logger.info("User %s checked in", user.pk)
    return profile, result


@transaction.atomic
def check_out(user) -> StaffProfile:
    profile = _profile_for(user)
    profile.is_working = False
    profile.last_check_out = timezone.now()
    profile.save(update_fields=["is_working", "last_check_out"])
    logger.info("User %s checked out", user.pk)
    return profile


def attendance_summary(division=None, headquarters=None, team=None, date=None):
    """
    Working / not-working overview, optionally narrowed to an org unit and to
    staff who checked in on a given local date.
    """
    qs = StaffProfile.objects.all()
    if division:
        qs = qs.filter(division=division)
    if headquarters:
        qs = qs.filter(headquarters=headquarters)
    if team:
        qs = qs.filter(team=team)

    profiles = list(qs.order_by("division", "headquarters", "team", "name"))
    if date is not None:
        profiles = [
            p for p in profiles
            if p.last_check_in and timezone.localtime(p.last_check_in).date() == date
        ]

    working = sum(1 for p in profiles if p.is_working)
    return {
        "staff": profiles,
        "total": len(profiles),
        "working": working,
        "not_working": len(profiles) - working,
    }
