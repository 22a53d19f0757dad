from .base import BaseMessenger, SEND_METHODS
from .telegram.telegram_messenger import TelegramMessenger

# Platform constants
PLATFORM_TELEGRAM = "Telegram"

# Centralized messenger registry
MESSENGER_REGISTRY = {
    PLATFORM_TELEGRAM: TelegramMessenger,
}


def build_messenger(config, platform=PLATFORM_TELEGRAM, **kwargs):
    """
    Instantiates the messenger registered for platform.
    """
    messenger_class = MESSENGER_REGISTRY.get(platform)
    if not messenger_class:
        raise ValueError(f"Unsupported messaging platform: {platform}")
    return messenger_class(config, **kwargs)


__all__ = [
    'MESSENGER_REGISTRY',
    'PLATFORM_TELEGRAM',
    'SEND_METHODS',
    'BaseMessenger',
    'TelegramMessenger',
    'build_messenger',
]
