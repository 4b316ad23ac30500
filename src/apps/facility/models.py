from django.db import models

from core.models import TimestampedModel


class Department(TimestampedModel):
    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True, db_index=True)

    def __str__(self) -> str:
        return self.name


class Block(TimestampedModel):
    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True, default="")

    def __str__(self) -> str:
        return self.name


class Location(TimestampedModel):
    name = models.CharField(max_length=120)
    floor = models.CharField(max_length=30, blank=True, default="")
    area_type = models.CharField(max_length=60, blank=True, default="")
    block = models.ForeignKey(
        Block,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="locations",
    )
    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="locations",
    )
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["block", "name"],
                name="unique_location_name_per_block",
            )
        ]

    def __str__(self) -> str:
        if self.block_id:
            return f"{self.block.name} / {self.name}"
        return self.name


class ServiceType(TimestampedModel):
    """Catalog entry offered to requesters; requests carry its name."""

    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True, default="")
    area_type = models.CharField(max_length=60, blank=True, default="")
    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="service_types",
    )
    location = models.ForeignKey(
        Location,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="service_types",
    )
    sla_enabled = models.BooleanField(default=False)
    sla_hours = models.PositiveIntegerField(default=0)
    sla_minutes = models.PositiveIntegerField(default=0)
    otp_verification_required = models.BooleanField(default=False)
    display_to_customer = models.BooleanField(default=True)
    icon_url = models.URLField(blank=True, default="")
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(sla_minutes__lt=60),
                name="service_type_sla_minutes_range",
            )
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def sla_total_minutes(self) -> int | None:
        if not self.sla_enabled:
            return None
        return self.sla_hours * 60 + self.sla_minutes
