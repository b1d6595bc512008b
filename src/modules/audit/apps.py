from django.apps import AppConfig, apps
from django.conf import settings
from django.db.models.signals import post_delete, post_save, pre_save


class AuditConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.audit"
    label = "audit"

    def ready(self) -> None:
        from modules.audit import recorder

        for label in settings.AUDIT_TRACKED_MODELS:
            model = apps.get_model(label)
            uid = f"audit.{label}"
            pre_save.connect(
                recorder.capture_previous_state, sender=model, dispatch_uid=uid
            )
            post_save.connect(recorder.record_save, sender=model, dispatch_uid=uid)
            post_delete.connect(
                recorder.record_delete, sender=model, dispatch_uid=uid
            )
