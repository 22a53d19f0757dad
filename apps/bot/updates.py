from dataclasses import dataclass, field

from .exceptions import MalformedUpdateError


@dataclass
class IncomingMessage:
    update_id: int | None
    chat_id: int
    message_id: int | None
    user_id: str
    text: str = ""
    username: str | None = None
    reply_to: dict | None = None
    raw: dict = field(default_factory=dict)


@dataclass
class CallbackQuery:
    update_id: int | None
    callback_id: str
    user_id: str
    chat_id: int
    message_id: int | None
    data: str = ""


def parse_update(payload):
    """
    Turns a Telegram update into an IncomingMessage or a CallbackQuery.
    Returns None for update types the bot does not handle (edits, channel
    posts, inline queries...). Raises MalformedUpdateError when a handled
    update lacks required fields.
    """
    if not isinstance(payload, dict):
        raise MalformedUpdateError("Update must be a JSON object")

    update_id = payload.get('update_id')

    if 'message' in payload:
        return _parse_message(update_id, payload['message'])
    if 'callback_query' in payload:
        return _parse_callback(update_id, payload['callback_query'])
    return None


def _parse_message(update_id, message):
    if not isinstance(message, dict):
        raise MalformedUpdateError("message must be an object")

    chat_id = (message.get('chat') or {}).get('id')
    if chat_id is None:
        raise MalformedUpdateError("message has no chat id")

    sender = message.get('from') or {}
    if sender.get('id') is None:
        raise MalformedUpdateError("message has no sender", chat_id=chat_id)

    return IncomingMessage(
        update_id=update_id,
        chat_id=chat_id,
        message_id=message.get('message_id'),
        user_id=str(sender['id']),
        text=message.get('text') or "",
        username=sender.get('username'),
        reply_to=message.get('reply_to_message'),
        raw=message,
    )


def _parse_callback(update_id, query):
    if not isinstance(query, dict) or not query.get('id'):
        raise MalformedUpdateError("callback_query has no id")

    callback_id = query['id']
    sender = query.get('from') or {}
    message = query.get('message') or {}
    chat_id = (message.get('chat') or {}).get('id')

    if sender.get('id') is None or chat_id is None:
        raise MalformedUpdateError(
            "callback_query has no sender or message", chat_id=chat_id, callback_id=callback_id
        )

    return CallbackQuery(
        update_id=update_id,
        callback_id=callback_id,
        user_id=str(sender['id']),
        chat_id=chat_id,
        message_id=message.get('message_id'),
        data=query.get('data') or "",
    )
