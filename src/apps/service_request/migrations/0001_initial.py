import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

STATUS_CHOICES = [
    ("NEW", "New"),
    ("ASSIGNED", "Assigned"),
    ("IN_PROGRESS", "In Progress"),
    ("ACTION_TAKEN", "Action Taken"),
    ("ON_HOLD", "On Hold"),
    ("COMPLETED", "Completed"),
    ("CLOSED", "Closed"),
    ("CANCELLED", "Cancelled"),
]


def _id_field():
    return models.BigAutoField(
        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
    )


def _created_at_field():
    return models.DateTimeField(db_index=True, default=django.utils.timezone.now)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("facility", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ServiceRequest",
            fields=[
                ("id", _id_field()),
                ("created_at", _created_at_field()),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("request_id", models.CharField(max_length=32, unique=True)),
                ("service_type", models.CharField(db_index=True, max_length=120)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, null=True)),
                (
                    "priority",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (1, "Critical"),
                            (2, "High"),
                            (3, "Medium"),
                            (4, "Low"),
                        ],
                        default=3,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=STATUS_CHOICES,
                        db_index=True,
                        default="NEW",
                        max_length=20,
                    ),
                ),
                ("requested_by", models.CharField(blank=True, default="", max_length=150)),
                ("estimated_time", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "completed_at",
                    models.DateTimeField(blank=True, db_index=True, null=True),
                ),
                (
                    "scheduled_date",
                    models.DateField(blank=True, db_index=True, null=True),
                ),
                ("scheduled_time", models.TimeField(blank=True, null=True)),
                ("recurring", models.BooleanField(default=False)),
                ("recurring_pattern", models.JSONField(blank=True, null=True)),
                (
                    "assigned_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="requests",
                        to="facility.department",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="requests",
                        to="facility.location",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["status", "created_at"],
                        name="service_req_status_5b2f0e_idx",
                    ),
                    models.Index(
                        fields=["assigned_to", "status"],
                        name="service_req_assigne_8c41a7_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("priority__gte", 1), ("priority__lte", 4)),
                        name="service_request_priority_range",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="RequestActivity",
            fields=[
                ("id", _id_field()),
                ("created_at", _created_at_field()),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("created", "Created"),
                            ("status_changed", "Status Changed"),
                            ("reassigned", "Reassigned"),
                            ("updated", "Updated"),
                        ],
                        db_index=True,
                        max_length=30,
                    ),
                ),
                (
                    "from_status",
                    models.CharField(
                        blank=True, choices=STATUS_CHOICES, max_length=20, null=True
                    ),
                ),
                (
                    "to_status",
                    models.CharField(
                        blank=True, choices=STATUS_CHOICES, max_length=20, null=True
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                (
                    "from_assignee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="activities",
                        to="service_request.servicerequest",
                    ),
                ),
                (
                    "to_assignee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "request activities",
                "indexes": [
                    models.Index(
                        fields=["request", "created_at"],
                        name="service_req_request_1d9e3c_idx",
                    ),
                    models.Index(
                        fields=["action", "created_at"],
                        name="service_req_action_77a0b2_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RequestLink",
            fields=[
                ("id", _id_field()),
                ("created_at", _created_at_field()),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("token", models.CharField(max_length=64, unique=True)),
                (
                    "link_type",
                    models.CharField(
                        choices=[
                            ("SMS", "SMS"),
                            ("WHATSAPP", "WhatsApp"),
                            ("QR", "QR Code"),
                            ("EMAIL", "Email"),
                        ],
                        default="QR",
                        max_length=20,
                    ),
                ),
                ("phone_number", models.CharField(blank=True, max_length=20, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("is_used", models.BooleanField(db_index=True, default=False)),
                (
                    "location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="request_links",
                        to="facility.location",
                    ),
                ),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="links",
                        to="service_request.servicerequest",
                    ),
                ),
            ],
            options={
                "abstract": False,
            },
        ),
    ]
