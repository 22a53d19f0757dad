from dataclasses import dataclass, field

from django.core.exceptions import ImproperlyConfigured

DEFAULT_PAGE_SIZE = 5
DEFAULT_CATEGORIES = ("general", "documents", "photos", "videos", "audio")


@dataclass(frozen=True)
class BotConfig:
    """
    Immutable bot configuration, built once at startup from settings.FILEBOT
    and handed to every component that needs credentials or limits.
    """
    bot_token: str
    bot_username: str
    admin_ids: frozenset = field(default_factory=frozenset)
    api_base: str = "https://api.telegram.org"
    link_base: str = "https://t.me"
    webhook_secret: str = ""
    request_timeout: float = 30.0
    page_size: int = DEFAULT_PAGE_SIZE
    categories: tuple = DEFAULT_CATEGORIES

    @classmethod
    def from_settings(cls, settings_dict):
        """
        Builds a BotConfig from the FILEBOT settings dict.
        Raises ImproperlyConfigured for values that cannot work.
        """
        settings_dict = settings_dict or {}

        page_size = int(settings_dict.get('PAGE_SIZE', DEFAULT_PAGE_SIZE))
        if page_size < 1:
            raise ImproperlyConfigured(f"FILEBOT['PAGE_SIZE'] must be at least 1, got {page_size}")

        bot_username = str(settings_dict.get('BOT_USERNAME', '')).lstrip('@')
        if not bot_username:
            raise ImproperlyConfigured("FILEBOT['BOT_USERNAME'] is required to build share links")

        categories = tuple(
            str(name).strip().lower() for name in settings_dict.get('CATEGORIES', DEFAULT_CATEGORIES)
            if str(name).strip()
        )

        return cls(
            bot_token=settings_dict.get('BOT_TOKEN', ''),
            bot_username=bot_username,
            admin_ids=frozenset(str(admin_id) for admin_id in settings_dict.get('ADMIN_IDS', [])),
            api_base=settings_dict.get('API_BASE', 'https://api.telegram.org').rstrip('/'),
            link_base=settings_dict.get('LINK_BASE', 'https://t.me').rstrip('/'),
            webhook_secret=settings_dict.get('WEBHOOK_SECRET', ''),
            request_timeout=float(settings_dict.get('REQUEST_TIMEOUT', 30.0)),
            page_size=page_size,
            categories=categories or DEFAULT_CATEGORIES,
        )

    def is_admin(self, user_id):
        return str(user_id) in self.admin_ids

    def share_link(self, file_id):
        return f"{self.link_base}/{self.bot_username}?start=post={file_id}"
