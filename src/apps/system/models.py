from django.db import models

from core.models import TimestampedModel

TRUTHY_VALUES = frozenset({"true", "1"})


class SystemSetting(TimestampedModel):
    key = models.CharField(max_length=100, unique=True)
    value = models.CharField(max_length=255)
    updated_by = models.ForeignKey(
        "account.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    def __str__(self) -> str:
        return f"{self.key}={self.value}"

    @property
    def as_bool(self) -> bool:
        return str(self.value).strip().lower() in TRUTHY_VALUES
