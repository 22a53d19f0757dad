"""
Unit tests for the Telegram messenger.

These tests mock HTTP calls to the Bot API using unittest.mock.
"""
import pytest
from dataclasses import replace
from unittest.mock import Mock, patch
import httpx
from apps.files.attachments import AttachmentKind
from apps.messaging.exceptions import MessengerError
from apps.messaging.providers import build_messenger, TelegramMessenger, SEND_METHODS, BaseMessenger

API_URL = "https://api.telegram.org/bot123456789:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawQ"


def ok_response(result):
    response = Mock()
    response.status_code = 200
    response.json.return_value = {'ok': True, 'result': result}
    return response


@pytest.fixture
def messenger(bot_config):
    return TelegramMessenger(bot_config, skip_validation=True)


@pytest.mark.unit
class TestTelegramMessengerInitialization:

    def test_init_with_valid_config(self, bot_config):
        messenger = TelegramMessenger(bot_config)

        assert messenger.bot_token == bot_config.bot_token
        assert messenger.api_base == "https://api.telegram.org"
        assert messenger.timeout == 30.0
        assert messenger.config is bot_config

    def test_init_with_empty_token_raises(self, bot_config):
        with pytest.raises(ValueError, match="Invalid Telegram bot configuration"):
            TelegramMessenger(replace(bot_config, bot_token=''))

    def test_init_uses_given_validator(self, bot_config):
        validator = Mock()
        validator.validate.return_value = True

        TelegramMessenger(bot_config, validator=validator)

        validator.validate.assert_called_once_with(skip_api_check=True)

    def test_build_messenger(self, bot_config):
        assert isinstance(build_messenger(bot_config, skip_validation=True), TelegramMessenger)

    def test_build_messenger_unknown_platform(self, bot_config):
        with pytest.raises(ValueError, match="Unsupported messaging platform"):
            build_messenger(bot_config, platform='Carrier Pigeon')


@pytest.mark.unit
class TestTelegramMessengerCalls:

    def test_send_message_posts_markdown_json(self, messenger):
        with patch('httpx.Client.post', return_value=ok_response({'message_id': 7})) as mock_post:
            result = messenger.send_message(42, "*hi*", reply_markup={'inline_keyboard': []})

        assert result == {'message_id': 7}
        mock_post.assert_called_once_with(
            f"{API_URL}/sendMessage",
            json={
                'chat_id': 42,
                'text': "*hi*",
                'parse_mode': 'Markdown',
                'reply_markup': {'inline_keyboard': []},
            },
        )

    def test_send_message_without_parse_mode(self, messenger):
        with patch('httpx.Client.post', return_value=ok_response({})) as mock_post:
            messenger.send_message(42, "plain_text", parse_mode=None)

        assert 'parse_mode' not in mock_post.call_args.kwargs['json']

    def test_edit_message_text(self, messenger):
        with patch('httpx.Client.post', return_value=ok_response({'message_id': 9})) as mock_post:
            messenger.edit_message_text(42, 9, "updated")

        assert mock_post.call_args.args[0] == f"{API_URL}/editMessageText"
        assert mock_post.call_args.kwargs['json']['message_id'] == 9

    def test_answer_callback_with_alert(self, messenger):
        with patch('httpx.Client.post', return_value=ok_response(True)) as mock_post:
            assert messenger.answer_callback('cb1', "Saved", show_alert=True) is True

        assert mock_post.call_args.kwargs['json'] == {
            'callback_query_id': 'cb1', 'text': "Saved", 'show_alert': True,
        }

    def test_answer_callback_without_text(self, messenger):
        with patch('httpx.Client.post', return_value=ok_response(True)) as mock_post:
            messenger.answer_callback('cb1')

        assert mock_post.call_args.kwargs['json'] == {'callback_query_id': 'cb1'}

    def test_delete_message(self, messenger):
        with patch('httpx.Client.post', return_value=ok_response(True)) as mock_post:
            messenger.delete_message(42, 9)

        assert mock_post.call_args.args[0] == f"{API_URL}/deleteMessage"

    def test_set_webhook_with_secret(self, messenger):
        with patch('httpx.Client.post', return_value=ok_response(True)) as mock_post:
            messenger.set_webhook("https://example.com/webhook/", secret_token="s3cret")

        payload = mock_post.call_args.kwargs['json']
        assert payload['url'] == "https://example.com/webhook/"
        assert payload['secret_token'] == "s3cret"
        assert payload['allowed_updates'] == ['message', 'callback_query']


@pytest.mark.unit
class TestTelegramMessengerAttachments:

    @pytest.mark.parametrize('kind, method, field', [
        (AttachmentKind.DOCUMENT, 'sendDocument', 'document'),
        (AttachmentKind.PHOTO, 'sendPhoto', 'photo'),
        (AttachmentKind.VIDEO, 'sendVideo', 'video'),
        (AttachmentKind.AUDIO, 'sendAudio', 'audio'),
        (AttachmentKind.VOICE, 'sendVoice', 'voice'),
        (AttachmentKind.ANIMATION, 'sendAnimation', 'animation'),
    ])
    def test_send_attachment_uses_kind_method(self, messenger, kind, method, field):
        with patch('httpx.Client.post', return_value=ok_response({'message_id': 1})) as mock_post:
            messenger.send_attachment(42, kind, 'HANDLE', caption="A caption")

        url, = mock_post.call_args.args
        assert url == f"{API_URL}/{method}"
        assert mock_post.call_args.kwargs['json'] == {'chat_id': 42, field: 'HANDLE', 'caption': "A caption"}

    def test_empty_caption_is_not_sent(self, messenger):
        with patch('httpx.Client.post', return_value=ok_response({})) as mock_post:
            messenger.send_attachment(42, 'photo', 'HANDLE', caption="")

        assert 'caption' not in mock_post.call_args.kwargs['json']

    def test_every_kind_has_a_send_method(self):
        for kind, method in SEND_METHODS.items():
            assert callable(getattr(BaseMessenger, method))


@pytest.mark.unit
class TestTelegramMessengerErrors:

    def test_non_200_raises(self, messenger):
        response = Mock()
        response.status_code = 403
        response.text = 'Forbidden: bot was blocked by the user'

        with patch('httpx.Client.post', return_value=response):
            with pytest.raises(MessengerError) as exc_info:
                messenger.send_message(42, "hi")

        assert '403' in str(exc_info.value)
        assert exc_info.value.status_code == 403
        assert exc_info.value.method == 'sendMessage'

    def test_ok_false_raises(self, messenger):
        response = Mock()
        response.status_code = 200
        response.json.return_value = {'ok': False, 'description': "Bad Request: message is not modified"}

        with patch('httpx.Client.post', return_value=response):
            with pytest.raises(MessengerError, match="message is not modified"):
                messenger.edit_message_text(42, 9, "same")

    def test_invalid_json_raises(self, messenger):
        response = Mock()
        response.status_code = 200
        response.json.side_effect = ValueError("Expecting value")

        with patch('httpx.Client.post', return_value=response):
            with pytest.raises(MessengerError, match="Invalid response"):
                messenger.send_message(42, "hi")

    def test_network_error_raises(self, messenger):
        with patch('httpx.Client.post', side_effect=httpx.ConnectError("Connection refused")):
            with pytest.raises(MessengerError, match="Network error"):
                messenger.send_message(42, "hi")

    def test_timeout_raises(self, messenger):
        with patch('httpx.Client.post', side_effect=httpx.ReadTimeout("timed out")):
            with pytest.raises(MessengerError):
                messenger.answer_callback('cb1')
