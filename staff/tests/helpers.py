from django.conf import settings
from django.contrib.auth.models import User
from django.test import override_settings

from staff.models import StaffProfile


def make_staff(username, name=None, role=StaffProfile.ROLE_STAFF, division="Sales",
               headquarters="Seoul HQ", team="Team A", email="", **profile):
    """Create an auth user with a staff profile and return the user."""
    user = User.objects.create_user(username=username, password="testpass123", email=email)
    StaffProfile.objects.create(
        user=user,
        name=name or username.title(),
        role=role,
        division=division,
        headquarters=headquarters,
        team=team,
        **profile,
    )
    return user


def sync_notifications():
    """Deliver notification email inline so tests can inspect mail.outbox."""
    return override_settings(VISITOR_DESK={**settings.VISITOR_DESK, "NOTIFICATION_ASYNC": False})
