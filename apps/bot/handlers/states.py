"""
Per-state routing. Every inbound message or button press goes to the
handler registered for the sender's current session state.
"""
import logging

from apps.chat_sessions.structures import SessionState
from apps.files.attachments import extract_attachment
from apps.files.exceptions import UnsupportedAttachmentError
from apps.bot import keyboards, messages
from apps.bot.parsing import (
    CANCEL_WORDS,
    CONFIRM_WORDS,
    CallbackAction,
    CallbackDataError,
    normalize_category,
    parse_callback_data,
    parse_command,
)
from . import actions
from .base import CallbackAnswer, ensure_complete
from .callbacks import run_callback
from .commands import handle_free_text, run_command

logger = logging.getLogger(__name__)


def idle_message(bot, message, session):
    parsed = parse_command(message.text)
    if parsed is not None:
        name, args = parsed
        run_command(bot, message, name, args, session)
        return

    try:
        attachment = extract_attachment(message.raw)
    except UnsupportedAttachmentError as e:
        logger.info(f"Unsupported upload from {message.user_id}: {str(e)}")
        bot.messenger.send_message(message.chat_id, messages.UNSUPPORTED_FILE)
        return

    if attachment is not None:
        if not bot.config.is_admin(message.user_id):
            logger.warning(f"Non-admin {message.user_id} sent a {attachment.kind.value} to store")
            bot.messenger.send_message(message.chat_id, messages.UNAUTHORIZED_SAVE)
            return
        bot.usage.record(message.user_id, "upload")
        actions.begin_save_flow(bot, message.chat_id, message.user_id, attachment)
        return

    handle_free_text(bot, message, session)


def awaiting_category_message(bot, message, session):
    parsed = parse_command(message.text)
    word = parsed[0] if parsed is not None else message.text.strip().lower()
    if word in CANCEL_WORDS:
        actions.cancel_save_flow(bot, message.chat_id, message.user_id)
        return
    if parsed is not None or not message.text.strip():
        bot.messenger.send_message(
            message.chat_id,
            messages.CHOOSE_CATEGORY_REMINDER,
            reply_markup=keyboards.category_keyboard(bot.config.categories),
        )
        return

    category = normalize_category(message.text)
    if not category:
        bot.messenger.send_message(message.chat_id, messages.INVALID_CATEGORY)
        return
    actions.complete_save(bot, message.chat_id, message.user_id, session, category)


def awaiting_confirm_message(bot, message, session):
    file_id = session.data.get('file_id')
    parsed = parse_command(message.text)
    word = parsed[0] if parsed is not None else message.text.strip().lower()

    if word in CONFIRM_WORDS and file_id:
        actions.confirm_delete(bot, message.chat_id, message.user_id, file_id)
    else:
        actions.cancel_delete(bot, message.chat_id, message.user_id)


MESSAGE_STATE_HANDLERS = ensure_complete({
    SessionState.IDLE: idle_message,
    SessionState.AWAITING_FILE_CATEGORY: awaiting_category_message,
    SessionState.AWAITING_DELETE_CONFIRM: awaiting_confirm_message,
}, SessionState, "MESSAGE_STATE_HANDLERS")


def route_callback(bot, query, session):
    try:
        action, params = parse_callback_data(query.data)
        return run_callback(bot, query, action, params, session)
    except CallbackDataError as e:
        logger.warning(f"Rejected button payload {query.data!r} from {query.user_id}: {str(e)}")
        return CallbackAnswer(messages.ANSWER_INVALID)


def awaiting_confirm_callback(bot, query, session):
    """
    Only a `confirm:delete:<id>` press for the pending file deletes it;
    every other button cancels the pending deletion.
    """
    file_id = session.data.get('file_id')
    try:
        action, params = parse_callback_data(query.data)
    except CallbackDataError:
        action, params = None, []

    if file_id and action == CallbackAction.CONFIRM and params == ["delete", file_id]:
        deleted = actions.confirm_delete(bot, query.chat_id, query.user_id, file_id, message_id=query.message_id)
        return CallbackAnswer(messages.ANSWER_DELETED if deleted else messages.ANSWER_FAILED)

    actions.cancel_delete(bot, query.chat_id, query.user_id, message_id=query.message_id)
    return CallbackAnswer(messages.ANSWER_CANCELLED)


CALLBACK_STATE_HANDLERS = ensure_complete({
    SessionState.IDLE: route_callback,
    SessionState.AWAITING_FILE_CATEGORY: route_callback,
    SessionState.AWAITING_DELETE_CONFIRM: awaiting_confirm_callback,
}, SessionState, "CALLBACK_STATE_HANDLERS")
