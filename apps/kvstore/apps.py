from django.apps import AppConfig


class KvstoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.kvstore'
    verbose_name = 'Key-value store'
