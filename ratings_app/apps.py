from django.apps import AppConfig


class RatingsAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'ratings_app'
    verbose_name = 'Ratings'

    def ready(self):
        from . import signals  # noqa: F401
