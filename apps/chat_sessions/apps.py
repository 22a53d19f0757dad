from django.apps import AppConfig


class ChatSessionsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.chat_sessions'
    verbose_name = 'Chat sessions'
