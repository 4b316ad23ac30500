import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("facility", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ServiceType",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        db_index=True, default=django.utils.timezone.now
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=120, unique=True)),
                ("description", models.TextField(blank=True, default="")),
                ("area_type", models.CharField(blank=True, default="", max_length=60)),
                ("sla_enabled", models.BooleanField(default=False)),
                ("sla_hours", models.PositiveIntegerField(default=0)),
                ("sla_minutes", models.PositiveIntegerField(default=0)),
                ("otp_verification_required", models.BooleanField(default=False)),
                ("display_to_customer", models.BooleanField(default=True)),
                ("icon_url", models.URLField(blank=True, default="")),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="service_types",
                        to="facility.department",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="service_types",
                        to="facility.location",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("sla_minutes__lt", 60)),
                        name="service_type_sla_minutes_range",
                    )
                ],
            },
        ),
    ]
