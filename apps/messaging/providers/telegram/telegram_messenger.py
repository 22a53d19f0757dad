import dataclasses
import logging

import httpx

from ..base import BaseMessenger
from .telegram_validator import TelegramConfigValidator
from apps.messaging.exceptions import MessengerError

logger = logging.getLogger(__name__)


class TelegramMessenger(BaseMessenger):
    """
    The implementation of the messenger for the Telegram Bot API.
    Every call is a JSON POST to https://api.telegram.org/bot<token>/<method>.
    """

    def __init__(self, config, skip_validation=False, validator=None):
        super().__init__(config)

        # Schema and format only; the live token check belongs to set_webhook
        if not skip_validation:
            if not validator:
                validator = TelegramConfigValidator(dataclasses.asdict(config))
            if not validator.validate(skip_api_check=True):
                raise ValueError("Invalid Telegram bot configuration")

        self.bot_token = config.bot_token
        self.api_base = config.api_base
        self.timeout = config.request_timeout
        self.parse_mode = "Markdown"

    def _call(self, method, payload) -> dict | bool:
        """
        Calls a Bot API method and returns its `result`.
        Raises MessengerError on transport errors, non-200 answers and
        `ok: false` bodies.
        """
        url = f"{self.api_base}/bot{self.bot_token}/{method}"
        logger.debug(f"Calling Telegram method {method} (chat: {payload.get('chat_id')})")

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.exception(f"HTTP error while calling Telegram method {method}: {e}")
            raise MessengerError(f"Network error calling {method}: {str(e)}", method=method) from e

        if response.status_code != 200:
            error_text = response.text
            logger.error(f"Telegram method {method} failed. Status: {response.status_code}, Error: {error_text}")
            raise MessengerError(
                f"Telegram API error (status {response.status_code}): {error_text}",
                method=method,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Telegram method {method} returned a non-JSON body")
            raise MessengerError(f"Invalid response from {method}: {str(e)}", method=method) from e

        if not data.get('ok'):
            description = data.get('description', 'unknown error')
            logger.error(f"Telegram method {method} returned ok=false: {description}")
            raise MessengerError(f"Telegram API error: {description}", method=method, status_code=response.status_code)

        return data.get('result')

    def _text_payload(self, text, options):
        payload = {'text': text, 'parse_mode': self.parse_mode}
        payload.update(options)
        if payload.get('parse_mode') is None:
            payload.pop('parse_mode')
        return payload

    def send_message(self, chat_id, text, **options):
        return self._call('sendMessage', {'chat_id': chat_id, **self._text_payload(text, options)})

    def send_document(self, chat_id, file_handle, **options):
        return self._call('sendDocument', {'chat_id': chat_id, 'document': file_handle, **options})

    def send_photo(self, chat_id, file_handle, **options):
        return self._call('sendPhoto', {'chat_id': chat_id, 'photo': file_handle, **options})

    def send_video(self, chat_id, file_handle, **options):
        return self._call('sendVideo', {'chat_id': chat_id, 'video': file_handle, **options})

    def send_audio(self, chat_id, file_handle, **options):
        return self._call('sendAudio', {'chat_id': chat_id, 'audio': file_handle, **options})

    def send_voice(self, chat_id, file_handle, **options):
        return self._call('sendVoice', {'chat_id': chat_id, 'voice': file_handle, **options})

    def send_animation(self, chat_id, file_handle, **options):
        return self._call('sendAnimation', {'chat_id': chat_id, 'animation': file_handle, **options})

    def edit_message_text(self, chat_id, message_id, text, **options):
        return self._call('editMessageText', {
            'chat_id': chat_id,
            'message_id': message_id,
            **self._text_payload(text, options),
        })

    def delete_message(self, chat_id, message_id):
        return self._call('deleteMessage', {'chat_id': chat_id, 'message_id': message_id})

    def answer_callback(self, callback_id, text=None, **options):
        payload = {'callback_query_id': callback_id, **options}
        if text:
            payload['text'] = text
        return self._call('answerCallbackQuery', payload)

    def set_webhook(self, url, secret_token=None, drop_pending_updates=False):
        payload = {
            'url': url,
            'allowed_updates': ['message', 'callback_query'],
            'drop_pending_updates': drop_pending_updates,
        }
        if secret_token:
            payload['secret_token'] = secret_token
        return self._call('setWebhook', payload)

    def delete_webhook(self, drop_pending_updates=False):
        return self._call('deleteWebhook', {'drop_pending_updates': drop_pending_updates})
