"""
directory.py
------------
Read-only lookups over staff identities (auth User + StaffProfile).

The queue and the assignment service only ever hold a user id; this module
is where those ids get resolved back into people and org units.
"""

import logging

from django.contrib.auth import get_user_model
from rest_framework.exceptions import NotFound

from ..models import StaffProfile

logger = logging.getLogger(__name__)


def get_staff_user(staff_id):
    """
    Resolve a staff identity by user id.

    Raises:
        NotFound: no user with a staff profile has this id.
    """
    User = get_user_model()
    user = (
        User.objects.select_related("staff_profile")
        .filter(pk=staff_id, staff_profile__isnull=False)
        .first()
    )
    if user is None:
        raise NotFound(f"Staff member {staff_id} not found.")
    return user


def find_staff_by_name_and_org_unit(name, division, headquarters, team):
    """
    Exact (name, division, headquarters, team) match.
    Returns the auth User or None.

    Names are not unique inside a team. When several profiles match, the
    earliest-created one (lowest id) is returned and a warning is logged.
    """
    division, headquarters, team = ((v or "").strip() for v in (division, headquarters, team))
    matches = list(
        StaffProfile.objects.select_related("user")
        .filter(
            name=(name or "").strip(),
            division=division,
            headquarters=headquarters,
            team=team,
        )
        .order_by("id")[:2]
    )
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            "Several staff named %r in %s/%s/%s; using the first one",
            name, division, headquarters, team,
        )
    return matches[0].user


def users_with_role(role):
    """Users whose profile carries the given role (admin topic, manager topic)."""
    User = get_user_model()
    return User.objects.filter(staff_profile__role=role, is_active=True).order_by("id")


def display_name(user):
    profile = getattr(user, "staff_profile", None)
    if profile and profile.name:
        return profile.name
    return user.get_full_name() or user.get_username()
