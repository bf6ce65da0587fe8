"""
seed_rotation.py
----------------
Replaces the work-order rotation with the given usernames, ranked in the order
they are listed. Same all-or-nothing rules as POST /api/staff/slots/bulk/.

Usage:
    python manage.py seed_rotation alice bob carol
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import APIException

from staff.services.work_order_queue import WorkOrderQueue


class Command(BaseCommand):
    help = "Replace the visitor intake rotation with the given staff usernames."

    def add_arguments(self, parser):
        parser.add_argument("usernames", nargs="+", help="Staff usernames in rotation order.")

    def handle(self, *args, **options):
        usernames = options["usernames"]
        User = get_user_model()
        by_name = {u.get_username(): u.pk for u in User.objects.filter(username__in=usernames)}

        missing = [name for name in usernames if name not in by_name]
        if missing:
            raise CommandError(f"Unknown username(s): {', '.join(missing)}")

        try:
            slots = WorkOrderQueue().replace_all([by_name[name] for name in usernames])
        except APIException as e:
            raise CommandError(str(e.detail))

        for slot in slots:
            self.stdout.write(f"#{slot.rank} {slot.staff.get_username()} (capacity {slot.capacity})")
        self.stdout.write(self.style.SUCCESS(f"Rotation seeded with {len(slots)} slot(s)."))
