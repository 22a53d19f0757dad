import logging

from apps.bot import messages
from apps.bot.config import BotConfig
from apps.bot.exceptions import MalformedUpdateError
from apps.bot.handlers.base import CallbackAnswer
from apps.bot.handlers.states import CALLBACK_STATE_HANDLERS, MESSAGE_STATE_HANDLERS
from apps.bot.updates import CallbackQuery, parse_update
from apps.chat_sessions.services.session_service import SessionService
from apps.files.repository import FileRepositoryKV
from apps.files.services.file_service import FileService
from apps.kvstore.repository import KeyValueStoreDjango
from apps.messaging.exceptions import MessengerError
from apps.messaging.providers import BaseMessenger, build_messenger
from apps.usage.services.usage_service import UsageService

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Routes one inbound update to the handler for the sender's session state.

    Handlers receive the dispatcher itself and reach the registry, sessions,
    usage counters and messenger through it. Nothing raised while handling an
    update escapes `dispatch`: failures are logged and, where possible,
    turned into a normal reply.
    """

    def __init__(self, config: BotConfig, files: FileService, sessions: SessionService,
                 usage: UsageService, messenger: BaseMessenger):
        if not isinstance(messenger, BaseMessenger):
            raise TypeError("messenger must be an instance of BaseMessenger")
        self.config = config
        self.files = files
        self.sessions = sessions
        self.usage = usage
        self.messenger = messenger

    def dispatch(self, payload):
        try:
            update = parse_update(payload)
        except MalformedUpdateError as e:
            logger.error(f"Malformed update {payload!r}: {str(e)}", exc_info=True)
            self._apologize(e.chat_id, e.callback_id)
            return

        if update is None:
            logger.debug(f"Ignoring unsupported update type: {sorted(payload)}")
            return

        if isinstance(update, CallbackQuery):
            self.handle_callback(update)
        else:
            self.handle_message(update)

    def handle_message(self, message):
        logger.info(f"Message from {message.user_id} in chat {message.chat_id}")
        try:
            session = self.sessions.get_or_create(message.user_id)
            MESSAGE_STATE_HANDLERS[session.state](self, message, session)
        except MessengerError as e:
            logger.error(f"Outbound call failed while handling message from {message.user_id}: {str(e)}")
        except Exception as e:
            logger.exception(f"Failed to handle message from {message.user_id}: {e}")
            self._apologize(message.chat_id)

    def handle_callback(self, query):
        """
        Handles a button press and acknowledges it exactly once, whether the
        handler succeeded or not.
        """
        logger.info(f"Button {query.data!r} from {query.user_id} in chat {query.chat_id}")
        try:
            session = self.sessions.get_or_create(query.user_id)
            answer = CALLBACK_STATE_HANDLERS[session.state](self, query, session) or CallbackAnswer()
        except MessengerError as e:
            logger.error(f"Outbound call failed while handling button from {query.user_id}: {str(e)}")
            answer = CallbackAnswer(messages.ANSWER_FAILED)
        except Exception as e:
            logger.exception(f"Failed to handle button from {query.user_id}: {e}")
            answer = CallbackAnswer(messages.ANSWER_FAILED, show_alert=True)

        self._answer(query.callback_id, answer)

    def respond(self, chat_id, text, message_id=None, **options):
        """
        Edits message_id in place when given, otherwise sends a new message.
        """
        if message_id is not None:
            return self.messenger.edit_message_text(chat_id, message_id, text, **options)
        return self.messenger.send_message(chat_id, text, **options)

    def _answer(self, callback_id, answer):
        options = {'show_alert': True} if answer.show_alert else {}
        try:
            self.messenger.answer_callback(callback_id, answer.text, **options)
        except MessengerError as e:
            logger.error(f"Failed to answer callback {callback_id}: {str(e)}")

    def _apologize(self, chat_id=None, callback_id=None):
        if callback_id:
            self._answer(callback_id, CallbackAnswer(messages.ANSWER_FAILED))
        if chat_id is None:
            return
        try:
            self.messenger.send_message(chat_id, messages.GENERIC_ERROR)
        except MessengerError as e:
            logger.error(f"Failed to send apology to chat {chat_id}: {str(e)}")


def build_dispatcher(config: BotConfig, store=None, messenger=None):
    """
    Wires a Dispatcher over the Django key-value store and the Telegram
    messenger unless other implementations are given.
    """
    if store is None:
        store = KeyValueStoreDjango()
    if messenger is None:
        messenger = build_messenger(config)

    return Dispatcher(
        config=config,
        files=FileService(FileRepositoryKV(store), config),
        sessions=SessionService(store),
        usage=UsageService(store),
        messenger=messenger,
    )
