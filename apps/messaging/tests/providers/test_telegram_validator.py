"""
Unit tests for TelegramConfigValidator.
"""
import pytest
from unittest.mock import Mock, patch
import httpx
from apps.messaging.providers.telegram.telegram_validator import TelegramConfigValidator

VALID_TOKEN = '123456789:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawQ'


@pytest.fixture
def valid_config():
    return {
        'bot_token': VALID_TOKEN,
        'bot_username': 'FileStoreBot',
        'request_timeout': 30.0,
        'page_size': 5,
    }


class TestTelegramConfigValidatorSchema:
    """Tests for schema validation (required fields, types)."""

    def test_valid_config_passes(self, valid_config):
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is True
        assert len(validator.get_errors()) == 0
        assert len(validator.get_warnings()) == 0

    def test_missing_bot_token_fails(self, valid_config):
        del valid_config['bot_token']
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is False
        assert any('bot_token' in error for error in validator.get_errors())

    def test_empty_bot_username_fails(self, valid_config):
        valid_config['bot_username'] = ''
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is False
        assert any('cannot be empty' in error for error in validator.get_errors())

    def test_wrong_type_fails(self, valid_config):
        valid_config['bot_token'] = 12345
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is False
        assert any('must be str' in error for error in validator.get_errors())

    def test_wrong_optional_type_fails(self, valid_config):
        valid_config['page_size'] = 'five'
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is False

    def test_non_dict_config_fails(self):
        validator = TelegramConfigValidator(['not', 'a', 'dict'])
        assert validator.validate(skip_api_check=True) is False
        assert "Config must be a dictionary" in validator.get_errors()

    def test_allow_errors_returns_true(self):
        validator = TelegramConfigValidator({})
        assert validator.validate(allow_errors=True, skip_api_check=True) is True
        assert len(validator.get_errors()) == 2


class TestTelegramConfigValidatorFormats:
    """Tests for token and username formats (warnings only)."""

    def test_odd_token_warns(self, valid_config):
        valid_config['bot_token'] = 'test-token'
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is True
        assert any('token format' in warning for warning in validator.get_warnings())

    def test_username_without_bot_suffix_warns(self, valid_config):
        valid_config['bot_username'] = 'FileStore'
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is True
        assert any('FileStore' in warning for warning in validator.get_warnings())

    def test_username_with_at_sign_is_accepted(self, valid_config):
        valid_config['bot_username'] = '@FileStoreBot'
        validator = TelegramConfigValidator(valid_config)
        validator.validate(skip_api_check=True)
        assert validator.get_warnings() == []


class TestTelegramConfigValidatorBusinessRules:

    def test_timeout_too_short_fails(self, valid_config):
        valid_config['request_timeout'] = 0.1
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is False

    def test_timeout_too_long_warns(self, valid_config):
        valid_config['request_timeout'] = 120
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is True
        assert len(validator.get_warnings()) == 1

    def test_page_size_zero_fails(self, valid_config):
        valid_config['page_size'] = 0
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is False

    def test_large_page_size_warns(self, valid_config):
        valid_config['page_size'] = 50
        validator = TelegramConfigValidator(valid_config)
        assert validator.validate(skip_api_check=True) is True
        assert any('page_size' in warning for warning in validator.get_warnings())


class TestTelegramConfigValidatorLiveApi:
    """Tests for the getMe check, with the HTTP call mocked."""

    def test_get_me_success(self, valid_config):
        response = Mock()
        response.status_code = 200
        response.json.return_value = {'ok': True, 'result': {'id': 1, 'username': 'FileStoreBot'}}

        with patch('httpx.Client.get', return_value=response) as mock_get:
            validator = TelegramConfigValidator(valid_config)
            assert validator.validate() is True

        mock_get.assert_called_once_with(f"https://api.telegram.org/bot{VALID_TOKEN}/getMe")
        assert validator.get_warnings() == []

    def test_get_me_other_username_warns(self, valid_config):
        response = Mock()
        response.status_code = 200
        response.json.return_value = {'ok': True, 'result': {'username': 'SomeOtherBot'}}

        with patch('httpx.Client.get', return_value=response):
            validator = TelegramConfigValidator(valid_config)
            assert validator.validate() is True

        assert any('SomeOtherBot' in warning for warning in validator.get_warnings())

    def test_unauthorized_token_fails(self, valid_config):
        response = Mock()
        response.status_code = 401

        with patch('httpx.Client.get', return_value=response):
            validator = TelegramConfigValidator(valid_config)
            assert validator.validate() is False

        assert "Bot token is invalid or unauthorized." in validator.get_errors()

    def test_network_error_fails(self, valid_config):
        with patch('httpx.Client.get', side_effect=httpx.ConnectError("Connection refused")):
            validator = TelegramConfigValidator(valid_config)
            assert validator.validate() is False

        assert any('Failed to validate bot token' in error for error in validator.get_errors())

    def test_api_check_skipped_after_schema_errors(self):
        with patch('httpx.Client.get') as mock_get:
            TelegramConfigValidator({}).validate()

        mock_get.assert_not_called()


class TestValidationReport:

    def test_report_for_valid_config(self, valid_config):
        validator = TelegramConfigValidator(valid_config)
        validator.validate(skip_api_check=True)
        assert validator.get_validation_report() == "[+] Configuration is valid"

    def test_report_lists_errors(self):
        validator = TelegramConfigValidator({})
        validator.validate(skip_api_check=True)
        report = validator.get_validation_report()
        assert "[x] 2 error(s) found:" in report
        assert "bot_username" in report
