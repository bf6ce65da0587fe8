import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("staff", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Visitor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("phone", models.CharField(max_length=20)),
                ("name_key", models.CharField(editable=False, max_length=100)),
                ("phone_key", models.CharField(editable=False, max_length=20)),
                ("has_reservation", models.BooleanField(default=False)),
                (
                    "kind",
                    models.CharField(
                        choices=[("reserved", "Reserved"), ("walkin", "Walk-in"), ("returning", "Returning")],
                        default="walkin",
                        max_length=10,
                    ),
                ),
                ("city", models.CharField(blank=True, max_length=50)),
                ("district", models.CharField(blank=True, max_length=50)),
                ("gender", models.CharField(blank=True, max_length=10)),
                ("age_group", models.CharField(blank=True, max_length=10)),
                (
                    "status",
                    models.CharField(
                        choices=[("waiting", "Waiting"), ("meeting", "Meeting"), ("completed", "Completed")],
                        default="waiting",
                        max_length=10,
                    ),
                ),
                ("notification_sent", models.BooleanField(default=False)),
                ("notification_confirmed", models.BooleanField(default=False)),
                ("visited_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "assigned_staff",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_visitors",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "previous_visit",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="visitors.visitor",
                    ),
                ),
                (
                    "slot",
                    models.ForeignKey(
                        blank=True,
                        help_text="Rotation slot whose load this visit holds until it completes.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="held_visits",
                        to="staff.staffslot",
                    ),
                ),
            ],
            options={
                "ordering": ["-visited_at", "-id"],
                "indexes": [
                    models.Index(fields=["name_key", "phone_key", "visited_at"], name="visitor_lookup_idx"),
                    models.Index(fields=["phone_key"], name="visitor_phone_idx"),
                    models.Index(fields=["status", "visited_at"], name="visitor_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("division", models.CharField(max_length=100)),
                ("headquarters", models.CharField(max_length=100)),
                ("team", models.CharField(max_length=100)),
                ("staff_name", models.CharField(max_length=100)),
                ("position", models.CharField(blank=True, max_length=100)),
                ("expected_visit_time", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "visitor",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reservation",
                        to="visitors.visitor",
                    ),
                ),
            ],
        ),
    ]
