import django.core.validators
import django.db.models.deletion
import staff.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StaffProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("phone", models.CharField(blank=True, max_length=20)),
                (
                    "role",
                    models.CharField(
                        choices=[("admin", "Admin"), ("manager", "Manager"), ("staff", "Staff")],
                        default="staff",
                        max_length=10,
                    ),
                ),
                ("division", models.CharField(max_length=100)),
                ("headquarters", models.CharField(max_length=100)),
                ("team", models.CharField(max_length=100)),
                ("position", models.CharField(blank=True, max_length=100)),
                ("is_working", models.BooleanField(default=False)),
                ("last_check_in", models.DateTimeField(blank=True, null=True)),
                ("last_check_out", models.DateTimeField(blank=True, null=True)),
                ("latitude", models.FloatField(blank=True, null=True)),
                ("longitude", models.FloatField(blank=True, null=True)),
                ("location_updated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="staff_profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["division", "headquarters", "team", "name"],
                "indexes": [
                    models.Index(
                        fields=["name", "division", "headquarters", "team"],
                        name="staff_profile_lookup_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="StaffSlot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rank", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("active", models.BooleanField(default=True)),
                ("current_load", models.PositiveIntegerField(default=0)),
                (
                    "capacity",
                    models.PositiveIntegerField(
                        default=staff.models.default_slot_capacity,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="work_slots",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["rank", "id"],
                "indexes": [models.Index(fields=["active", "rank"], name="staff_slot_active_rank_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("active", True)),
                        fields=("rank",),
                        name="unique_active_slot_rank",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("active", True)),
                        fields=("staff",),
                        name="unique_active_slot_staff",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("current_load__lte", models.F("capacity"))),
                        name="slot_load_within_capacity",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("capacity__gte", 1)),
                        name="slot_capacity_positive",
                    ),
                ],
            },
        ),
    ]
