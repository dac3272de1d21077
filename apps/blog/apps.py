from django.apps import AppConfig


class BlogConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.blog"
    label = "blog"
    verbose_name = "Blog"

    def ready(self):
        """Block rows removed by cascade still take their entity with them."""
        import apps.blog.signals  # noqa: F401
