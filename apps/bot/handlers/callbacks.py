import logging

from apps.chat_sessions.structures import SessionState
from apps.bot import keyboards, messages
from apps.bot.parsing import CallbackAction, normalize_category, param, page_param, CallbackDataError
from . import actions
from .base import CallbackAnswer, ensure_complete

logger = logging.getLogger(__name__)


def handle_file_callback(bot, query, params, session):
    sub_action = param(params, 0)

    if sub_action == "list":
        actions.show_own_files(bot, query.chat_id, query.user_id, page_param(params, 1), message_id=query.message_id)
        return None

    file_id = param(params, 1)
    if sub_action == "delete":
        actions.request_delete(bot, query.chat_id, query.user_id, file_id)
        return None
    if sub_action == "share":
        return _share(bot, query, file_id)

    raise CallbackDataError(f"Unknown file action: {sub_action!r}")


def _share(bot, query, file_id):
    record = bot.files.get(file_id)
    if record is None:
        return CallbackAnswer(messages.ANSWER_NOT_FOUND, show_alert=True)
    if not bot.files.can_manage(record, query.user_id):
        return CallbackAnswer(messages.ANSWER_UNAUTHORIZED, show_alert=True)

    bot.messenger.send_message(
        query.chat_id,
        messages.share_link(record, bot.files.share_link(record.id)),
        reply_markup=keyboards.back_to_files_keyboard(),
    )
    return CallbackAnswer(messages.ANSWER_LINK_READY)


def handle_page_callback(bot, query, params, session):
    list_name = param(params, 0)
    page_number = page_param(params, 1)

    if list_name == "files":
        actions.show_own_files(bot, query.chat_id, query.user_id, page_number, message_id=query.message_id)
        return None
    if list_name == "category":
        if not bot.config.is_admin(query.user_id):
            return CallbackAnswer(messages.ANSWER_UNAUTHORIZED, show_alert=True)
        category = normalize_category(":".join(params[2:]))
        if not category:
            raise CallbackDataError("Missing category name")
        actions.show_category_files(bot, query.chat_id, category, page_number, message_id=query.message_id)
        return None

    raise CallbackDataError(f"Unknown list: {list_name!r}")


def handle_category_callback(bot, query, params, session):
    if session.state != SessionState.AWAITING_FILE_CATEGORY:
        return CallbackAnswer(messages.ANSWER_STALE)

    name = ":".join(params)
    if name == "cancel":
        actions.cancel_save_flow(bot, query.chat_id, query.user_id, message_id=query.message_id)
        return CallbackAnswer(messages.ANSWER_CANCELLED)

    category = normalize_category(name)
    if not category:
        raise CallbackDataError(f"Invalid category: {name!r}")
    if actions.complete_save(bot, query.chat_id, query.user_id, session, category, message_id=query.message_id):
        return CallbackAnswer(messages.ANSWER_SAVED)
    return CallbackAnswer(messages.ANSWER_FAILED)


def handle_delete_callback(bot, query, params, session):
    actions.request_delete(bot, query.chat_id, query.user_id, param(params, 0))
    return None


def handle_confirm_callback(bot, query, params, session):
    # Confirmations are consumed by the awaiting_delete_confirm state handler
    return CallbackAnswer(messages.ANSWER_STALE)


CALLBACK_HANDLERS = ensure_complete({
    CallbackAction.FILE: handle_file_callback,
    CallbackAction.PAGE: handle_page_callback,
    CallbackAction.CATEGORY: handle_category_callback,
    CallbackAction.DELETE: handle_delete_callback,
    CallbackAction.CONFIRM: handle_confirm_callback,
}, CallbackAction, "CALLBACK_HANDLERS")


def run_callback(bot, query, action, params, session):
    bot.usage.record(query.user_id, f"button:{action.value}")
    return CALLBACK_HANDLERS[action](bot, query, params, session)
