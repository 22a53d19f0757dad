import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class BotAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.bot'
    label = 'bot'
    verbose_name = 'File-store bot'

    bot_config = None

    def ready(self):
        from .config import BotConfig

        self.bot_config = BotConfig.from_settings(getattr(settings, 'FILEBOT', {}))
        logger.info(
            f"Bot configured as @{self.bot_config.bot_username} with {len(self.bot_config.admin_ids)} admin(s)"
        )
