import logging

from apps.kvstore.repository import BaseKeyValueStore
from apps.kvstore.utils import now_ms
from apps.chat_sessions.structures import Session, SessionState

logger = logging.getLogger(__name__)

SESSION_PREFIX = "session:"


class SessionService:
    """
    Stores one Session document per user under `session:<user_id>`.

    Every write replaces the whole document, so two events from the same user
    handled at the same time can overwrite each other's transition; the last
    writer wins.
    """

    def __init__(self, store: BaseKeyValueStore):
        if not isinstance(store, BaseKeyValueStore):
            raise TypeError("store must be an instance of BaseKeyValueStore")
        self.store = store

    def _key(self, user_id):
        return f"{SESSION_PREFIX}{user_id}"

    def get_or_create(self, user_id) -> Session:
        """
        Returns the user's session, creating an idle one on first access.
        """
        user_id = str(user_id)
        data = self.store.get(self._key(user_id))
        if data is not None:
            try:
                return Session.from_dict(data)
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"Discarding unreadable session for user {user_id}: {str(e)}")

        now = now_ms()
        session = Session(user_id=user_id, created_at=now, last_active_at=now)
        self.store.put(self._key(user_id), session.to_dict())
        logger.debug(f"Created session for user {user_id}")
        return session

    def transition(self, user_id, new_state: SessionState, data=None) -> Session:
        """
        Moves the user to new_state, replacing the session data entirely.
        """
        session = self.get_or_create(user_id)
        previous_state = session.state

        session.state = SessionState(new_state)
        session.data = dict(data or {})
        session.last_active_at = max(now_ms(), session.last_active_at)
        self.store.put(self._key(session.user_id), session.to_dict())

        logger.info(f"Session {session.user_id}: {previous_state.value} -> {session.state.value}")
        return session

    def reset(self, user_id) -> Session:
        return self.transition(user_id, SessionState.IDLE, {})
