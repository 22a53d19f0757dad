import logging

from django.utils import timezone

from apps.kvstore.repository import BaseKeyValueStore
from apps.kvstore.utils import now_ms

logger = logging.getLogger(__name__)

USER_PREFIX = "usage:user:"
ACTION_PREFIX = "usage:action:"
DAY_PREFIX = "usage:day:"
TOTALS_KEY = "usage:totals"


class UsageService:
    """
    Activity counters per user, per action and per day.
    Reporting only: nothing in the bot takes decisions based on them, and a
    failure to record never reaches the caller.
    """

    def __init__(self, store: BaseKeyValueStore):
        if not isinstance(store, BaseKeyValueStore):
            raise TypeError("store must be an instance of BaseKeyValueStore")
        self.store = store

    def record(self, user_id, action):
        try:
            self._record(str(user_id), action)
        except Exception as e:
            logger.error(f"Failed to record usage of '{action}' by {user_id}: {str(e)}", exc_info=True)

    def _record(self, user_id, action):
        now = now_ms()

        user_key = f"{USER_PREFIX}{user_id}"
        user_stats = self.store.get(user_key) or {'count': 0, 'first_seen': now, 'actions': {}}
        user_stats['count'] += 1
        user_stats['last_seen'] = now
        user_stats['actions'][action] = user_stats['actions'].get(action, 0) + 1
        self.store.put(user_key, user_stats)

        action_key = f"{ACTION_PREFIX}{action}"
        action_stats = self.store.get(action_key) or {'count': 0}
        action_stats['count'] += 1
        self.store.put(action_key, action_stats)

        day_key = f"{DAY_PREFIX}{timezone.now().date().isoformat()}"
        day_stats = self.store.get(day_key) or {'total': 0, 'actions': {}}
        day_stats['total'] += 1
        day_stats['actions'][action] = day_stats['actions'].get(action, 0) + 1
        self.store.put(day_key, day_stats)

        totals = self.store.get(TOTALS_KEY) or {'actions': 0}
        totals['actions'] += 1
        self.store.put(TOTALS_KEY, totals)

        logger.debug(f"Recorded '{action}' for user {user_id}")

    def summary(self):
        """
        Aggregate counters: distinct users, total actions, per-action counts
        and today's breakdown.
        """
        action_keys = self.store.list_keys_by_prefix(ACTION_PREFIX)
        actions = {
            key[len(ACTION_PREFIX):]: value.get('count', 0)
            for key, value in self.store.get_many(action_keys).items()
        }
        today = self.store.get(f"{DAY_PREFIX}{timezone.now().date().isoformat()}") or {'total': 0, 'actions': {}}
        totals = self.store.get(TOTALS_KEY) or {'actions': 0}
        return {
            'distinct_users': len(self.store.list_keys_by_prefix(USER_PREFIX)),
            'total_actions': totals.get('actions', 0),
            'actions': actions,
            'today': today,
        }

    def user_summary(self, user_id):
        return self.store.get(f"{USER_PREFIX}{user_id}") or {'count': 0, 'actions': {}}
