import logging

from django.db import transaction

from system.models import SystemSetting

logger = logging.getLogger(__name__)

SYSTEM_STATUS_KEY = "system_active_status"


class SystemSettingService:
    @staticmethod
    def ensure_setting(key: str, *, default: str) -> SystemSetting:
        setting, created = SystemSetting.objects.get_or_create(
            key=key, defaults={"value": default}
        )
        if created:
            logger.info("System setting initialized: key=%s value=%s", key, default)
        return setting

    @classmethod
    def get_system_status(cls) -> SystemSetting:
        """The portal's on/off switch. Missing rows start out active."""
        return cls.ensure_setting(SYSTEM_STATUS_KEY, default="true")

    @classmethod
    @transaction.atomic
    def set_system_status(cls, *, is_active: bool, actor=None) -> SystemSetting:
        setting = cls.get_system_status()
        setting = SystemSetting.objects.select_for_update().get(pk=setting.pk)
        setting.value = "true" if is_active else "false"
        setting.updated_by = actor
        setting.save(update_fields=["value", "updated_by", "updated_at"])
        logger.info(
            "System status changed: is_active=%s actor_user_id=%s",
            is_active,
            getattr(actor, "pk", None),
        )
        return setting
