from django.utils import timezone


def now_ms():
    """Current time as epoch milliseconds, the timestamp format of every stored document."""
    return int(timezone.now().timestamp() * 1000)
