from django.apps import AppConfig


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    def ready(self):
        # Registers the setting_changed receiver for engine settings
        import core_backend.config  # noqa: F401
