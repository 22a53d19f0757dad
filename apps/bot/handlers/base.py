from dataclasses import dataclass

from django.core.exceptions import ImproperlyConfigured


@dataclass
class CallbackAnswer:
    """What to show when acknowledging a button press."""
    text: str | None = None
    show_alert: bool = False


def ensure_complete(table, members, table_name):
    """
    Fails at import time when a dispatch table lacks an entry for one of
    the enum members it is keyed by.
    """
    missing = [member.value for member in members if member not in table]
    if missing:
        raise ImproperlyConfigured(f"{table_name} has no handler for: {missing}")
    return table
