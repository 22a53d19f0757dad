"""
Operations shared by command, callback and state handlers.

Each operation sends its reply before persisting a session transition, so a
failed outbound call leaves the session as it was.
"""
import logging

from apps.chat_sessions.structures import SessionState
from apps.files.attachments import attachment_from_dict, parse_kind
from apps.files.exceptions import UnsupportedAttachmentError, FileIntegrityError
from apps.bot import keyboards, messages
from apps.bot.pagination import paginate

logger = logging.getLogger(__name__)


def show_welcome(bot, chat_id):
    bot.messenger.send_message(
        chat_id,
        messages.welcome(bot.config.share_link("<post_id>")),
        reply_markup=keyboards.welcome_keyboard(),
    )


def show_help(bot, chat_id, user_id):
    bot.messenger.send_message(chat_id, messages.help_text(bot.config.is_admin(user_id)))


def deliver_file(bot, chat_id, user_id, file_id):
    """
    Sends a stored file back to the requester and counts the retrieval.
    """
    try:
        record = bot.files.get(file_id)
    except FileIntegrityError as e:
        logger.error(f"Stored record {file_id} is unreadable: {str(e)}")
        bot.messenger.send_message(chat_id, messages.FILE_DATA_ERROR)
        return

    if record is None:
        logger.info(f"Retrieval of unknown file {file_id} by {user_id}")
        bot.messenger.send_message(chat_id, messages.file_not_found(file_id))
        return

    try:
        kind = parse_kind(record.kind)
    except UnsupportedAttachmentError as e:
        logger.error(f"File {record.id} has an unsupported kind: {str(e)}")
        bot.messenger.send_message(chat_id, messages.FILE_DATA_ERROR)
        return

    bot.files.record_access(record.id)
    bot.messenger.send_attachment(chat_id, kind, record.file_handle, caption=record.caption)
    bot.usage.record(user_id, "retrieve")
    logger.info(f"Delivered {kind.value} file {record.id} to {user_id}")


def begin_save_flow(bot, chat_id, user_id, attachment):
    """
    Asks for a category and parks the attachment in the session.
    """
    bot.messenger.send_message(
        chat_id,
        messages.choose_category(attachment),
        reply_markup=keyboards.category_keyboard(bot.config.categories),
    )
    bot.sessions.transition(user_id, SessionState.AWAITING_FILE_CATEGORY, {'attachment': attachment.to_dict()})


def complete_save(bot, chat_id, user_id, session, category, message_id=None):
    """
    Saves the parked attachment under category and replies with its share link.
    Returns the new file id, or None when the parked data was unusable.
    """
    try:
        attachment = attachment_from_dict(session.data.get('attachment'))
    except UnsupportedAttachmentError as e:
        logger.error(f"Pending attachment of user {user_id} is unusable: {str(e)}")
        bot.respond(chat_id, messages.UNSUPPORTED_FILE, message_id=message_id)
        bot.sessions.reset(user_id)
        return None

    file_id = bot.files.save(attachment, user_id, category)
    bot.respond(chat_id, messages.file_saved(bot.files.share_link(file_id), category), message_id=message_id)
    bot.sessions.reset(user_id)
    bot.usage.record(user_id, "save")
    return file_id


def cancel_save_flow(bot, chat_id, user_id, message_id=None):
    bot.respond(chat_id, messages.UPLOAD_CANCELLED, message_id=message_id)
    bot.sessions.reset(user_id)


def request_delete(bot, chat_id, user_id, file_id, message_id=None):
    """
    Asks the user to confirm deleting file_id. Missing files and foreign
    files are reported without touching the session.
    Returns True when the confirmation flow was started.
    """
    record = bot.files.get(file_id)
    if record is None:
        bot.respond(chat_id, messages.file_not_found(file_id), message_id=message_id)
        return False
    if not bot.files.can_manage(record, user_id):
        logger.warning(f"User {user_id} tried to delete file {file_id} owned by {record.owner_id}")
        bot.respond(chat_id, messages.UNAUTHORIZED, message_id=message_id)
        return False

    bot.respond(
        chat_id,
        messages.confirm_delete(record),
        message_id=message_id,
        reply_markup=keyboards.confirm_delete_keyboard(record.id),
    )
    bot.sessions.transition(user_id, SessionState.AWAITING_DELETE_CONFIRM, {'file_id': record.id})
    return True


def confirm_delete(bot, chat_id, user_id, file_id, message_id=None):
    deleted = False
    record = bot.files.get(file_id)
    if record is None:
        text = messages.file_not_found(file_id)
    elif bot.files.delete(file_id, user_id):
        deleted = True
        text = messages.file_deleted(record)
        bot.usage.record(user_id, "delete")
    else:
        text = messages.UNAUTHORIZED

    bot.respond(chat_id, text, message_id=message_id)
    bot.sessions.reset(user_id)
    return deleted


def cancel_delete(bot, chat_id, user_id, message_id=None):
    bot.respond(chat_id, messages.DELETE_CANCELLED, message_id=message_id)
    bot.sessions.reset(user_id)


def render_listing(bot, chat_id, records, page_number, title, empty_text, page_callback, message_id=None):
    if not records:
        bot.respond(chat_id, empty_text, message_id=message_id)
        return None

    page = paginate(records, page_number, bot.config.page_size)
    bot.respond(
        chat_id,
        messages.file_list(title, page),
        message_id=message_id,
        reply_markup=keyboards.file_list_keyboard(page, page_callback),
    )
    return page


def show_own_files(bot, chat_id, user_id, page_number=1, message_id=None):
    return render_listing(
        bot,
        chat_id,
        bot.files.list_by_owner(user_id),
        page_number,
        "📂 Your files",
        messages.NO_FILES,
        lambda n: ("files", n),
        message_id=message_id,
    )


def show_category_files(bot, chat_id, category, page_number=1, message_id=None):
    return render_listing(
        bot,
        chat_id,
        bot.files.list_by_category(category),
        page_number,
        f"🏷 {category}",
        messages.EMPTY_CATEGORY,
        lambda n: ("category", n, category),
        message_id=message_id,
    )


def show_stats(bot, chat_id, user_id, session):
    if bot.config.is_admin(user_id):
        text = messages.admin_stats(bot.usage.summary(), bot.files.top_accessed(5))
    else:
        text = messages.user_stats(
            len(bot.files.list_by_owner(user_id)), session, bot.usage.user_summary(user_id)
        )
    bot.messenger.send_message(chat_id, text)
