from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = models.Manager()

    class Meta:
        abstract = True


class AppendOnlyQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise ValidationError(
            f"{self.model.__name__} rows are append-only and cannot be updated."
        )

    def delete(self):
        raise ValidationError(
            f"{self.model.__name__} rows are append-only and cannot be deleted."
        )


class AppendOnlyManager(models.Manager.from_queryset(AppendOnlyQuerySet)):
    pass


class AppendOnlyModel(models.Model):
    """
    Immutable ledger row. Rows can only be inserted; instance saves after the
    first insert, queryset updates and deletes raise ValidationError.

    Cascading deletes from an owning row still work because Django's collector
    deletes related rows with raw SQL instead of going through these methods.
    """

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    objects = AppendOnlyManager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(
                f"{type(self).__name__} rows are append-only and cannot be updated."
            )
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            f"{type(self).__name__} rows are append-only and cannot be deleted."
        )
