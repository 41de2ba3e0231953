from django.apps import AppConfig


class StoresAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'stores_app'
    verbose_name = 'Stores'
