from django.apps import AppConfig


class CreationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.creations"
    label = "creations"
    verbose_name = "Creations"

    def ready(self):
        """Block rows removed by cascade still take their entity with them."""
        import apps.creations.signals  # noqa: F401
