import logging

from apps.files.attachments import extract_attachment
from apps.files.exceptions import UnsupportedAttachmentError
from apps.bot import messages
from apps.bot.parsing import Command, Intent, match_intent, normalize_category, parse_retrieval_token
from . import actions
from .base import ensure_complete

logger = logging.getLogger(__name__)


def handle_start(bot, message, args, session):
    file_id = parse_retrieval_token(args)
    if file_id:
        actions.deliver_file(bot, message.chat_id, message.user_id, file_id)
    else:
        actions.show_welcome(bot, message.chat_id)


def handle_help(bot, message, args, session):
    actions.show_help(bot, message.chat_id, message.user_id)


def handle_save(bot, message, args, session):
    if not bot.config.is_admin(message.user_id):
        logger.warning(f"Non-admin {message.user_id} tried to save a file")
        bot.messenger.send_message(message.chat_id, messages.UNAUTHORIZED_SAVE)
        return
    if not message.reply_to:
        bot.messenger.send_message(message.chat_id, messages.SAVE_NEEDS_REPLY)
        return

    try:
        attachment = extract_attachment(message.reply_to)
    except UnsupportedAttachmentError as e:
        logger.info(f"Cannot save replied message: {str(e)}")
        attachment = None
    if attachment is None:
        bot.messenger.send_message(message.chat_id, messages.UNSUPPORTED_FILE)
        return

    actions.begin_save_flow(bot, message.chat_id, message.user_id, attachment)


def handle_files(bot, message, args, session):
    page_number = int(args) if args.isdigit() else 1
    actions.show_own_files(bot, message.chat_id, message.user_id, page_number)


def handle_delete(bot, message, args, session):
    file_id = args.split()[0] if args else None
    if not file_id:
        bot.messenger.send_message(message.chat_id, messages.DELETE_USAGE)
        return
    actions.request_delete(bot, message.chat_id, message.user_id, file_id)


def handle_stats(bot, message, args, session):
    actions.show_stats(bot, message.chat_id, message.user_id, session)


def handle_cancel(bot, message, args, session):
    # Pending flows consume /cancel in their own state handlers
    bot.messenger.send_message(message.chat_id, messages.NOTHING_TO_CANCEL)


def handle_browse(bot, message, args, session):
    if not bot.config.is_admin(message.user_id):
        bot.messenger.send_message(message.chat_id, messages.UNAUTHORIZED)
        return
    category = normalize_category(args)
    if not category:
        bot.messenger.send_message(message.chat_id, messages.BROWSE_USAGE)
        return
    actions.show_category_files(bot, message.chat_id, category)


COMMAND_HANDLERS = ensure_complete({
    Command.START: handle_start,
    Command.HELP: handle_help,
    Command.SAVE: handle_save,
    Command.FILES: handle_files,
    Command.DELETE: handle_delete,
    Command.STATS: handle_stats,
    Command.CANCEL: handle_cancel,
    Command.BROWSE: handle_browse,
}, Command, "COMMAND_HANDLERS")


def run_command(bot, message, name, args, session):
    """
    Runs a parsed command. Unknown command words get a fixed reply and
    leave the session untouched.
    """
    try:
        command = Command(name)
    except ValueError:
        logger.info(f"Unknown command /{name} from {message.user_id}")
        bot.messenger.send_message(message.chat_id, messages.COMMAND_NOT_RECOGNIZED)
        return

    bot.usage.record(message.user_id, command.value)
    COMMAND_HANDLERS[command](bot, message, args, session)


INTENT_HANDLERS = ensure_complete({
    Intent.GREETING: lambda bot, message, session: actions.show_welcome(bot, message.chat_id),
    Intent.MY_FILES: lambda bot, message, session: actions.show_own_files(bot, message.chat_id, message.user_id),
    Intent.STATS: lambda bot, message, session: actions.show_stats(bot, message.chat_id, message.user_id, session),
    Intent.HELP: lambda bot, message, session: actions.show_help(bot, message.chat_id, message.user_id),
}, Intent, "INTENT_HANDLERS")


def handle_free_text(bot, message, session):
    intent = match_intent(message.text)
    if intent is None:
        bot.messenger.send_message(message.chat_id, messages.NOT_UNDERSTOOD)
        return
    logger.debug(f"Free text from {message.user_id} matched intent {intent.value}")
    bot.usage.record(message.user_id, f"intent:{intent.value}")
    INTENT_HANDLERS[intent](bot, message, session)
