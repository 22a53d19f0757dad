from dataclasses import dataclass, field
from enum import Enum


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_FILE_CATEGORY = "awaiting_file_category"
    AWAITING_DELETE_CONFIRM = "awaiting_delete_confirm"


@dataclass
class Session:
    """
    Per-user conversation state. `data` holds exactly what the continuation
    handler of `state` expects and is replaced wholesale on every transition.
    """
    user_id: str
    state: SessionState = SessionState.IDLE
    data: dict = field(default_factory=dict)
    created_at: int = 0
    last_active_at: int = 0

    @property
    def is_idle(self):
        return self.state == SessionState.IDLE

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'state': self.state.value,
            'data': self.data,
            'created_at': self.created_at,
            'last_active_at': self.last_active_at,
        }

    @classmethod
    def from_dict(cls, data):
        try:
            state = SessionState(data.get('state', SessionState.IDLE.value))
        except ValueError:
            # States that no longer exist fall back to idle
            state = SessionState.IDLE
            data = {**data, 'data': {}}
        return cls(
            user_id=str(data['user_id']),
            state=state,
            data=dict(data.get('data') or {}),
            created_at=int(data.get('created_at') or 0),
            last_active_at=int(data.get('last_active_at') or 0),
        )
