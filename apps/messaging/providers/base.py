from abc import ABC, abstractmethod

from django.core.exceptions import ImproperlyConfigured

from apps.files.attachments import AttachmentKind

# Messenger method used to deliver each attachment kind
SEND_METHODS = {
    AttachmentKind.DOCUMENT: 'send_document',
    AttachmentKind.PHOTO: 'send_photo',
    AttachmentKind.VIDEO: 'send_video',
    AttachmentKind.AUDIO: 'send_audio',
    AttachmentKind.VOICE: 'send_voice',
    AttachmentKind.ANIMATION: 'send_animation',
}

_missing_kinds = set(AttachmentKind) - set(SEND_METHODS)
if _missing_kinds:
    raise ImproperlyConfigured(f"No send method registered for: {sorted(k.value for k in _missing_kinds)}")


class BaseMessenger(ABC):
    """
    An abstract base class that all messaging platforms must implement.
    This defines the contract the bot dispatcher uses to talk back to users.

    Every method raises MessengerError when the platform call fails; callers
    decide whether that failure matters.
    """

    def __init__(self, config):
        """
        Initializes the messenger with its configuration.
        """
        self.config = config

    @abstractmethod
    def send_message(self, chat_id, text, **options) -> dict:
        """
        Sends a text message. `options` may carry reply_markup, parse_mode...
        Returns the platform's message object.
        """
        pass

    @abstractmethod
    def send_document(self, chat_id, file_handle, **options) -> dict:
        pass

    @abstractmethod
    def send_photo(self, chat_id, file_handle, **options) -> dict:
        pass

    @abstractmethod
    def send_video(self, chat_id, file_handle, **options) -> dict:
        pass

    @abstractmethod
    def send_audio(self, chat_id, file_handle, **options) -> dict:
        pass

    @abstractmethod
    def send_voice(self, chat_id, file_handle, **options) -> dict:
        pass

    @abstractmethod
    def send_animation(self, chat_id, file_handle, **options) -> dict:
        pass

    @abstractmethod
    def edit_message_text(self, chat_id, message_id, text, **options) -> dict:
        """
        Replaces the text (and optionally the keyboard) of a sent message.
        """
        pass

    @abstractmethod
    def delete_message(self, chat_id, message_id) -> bool:
        pass

    @abstractmethod
    def answer_callback(self, callback_id, text=None, **options) -> bool:
        """
        Acknowledges a button press so the client stops showing a spinner.
        """
        pass

    def send_attachment(self, chat_id, kind: AttachmentKind, file_handle, caption="", **options) -> dict:
        """
        Delivers a stored file handle with the send method matching its kind.
        The caption is only forwarded when non-empty.
        """
        send = getattr(self, SEND_METHODS[AttachmentKind(kind)])
        if caption:
            options['caption'] = caption
        return send(chat_id, file_handle, **options)
