"""
Shared pytest fixtures for the filebot project.
"""
import pytest
from unittest.mock import Mock
from apps.bot.config import BotConfig
from apps.bot.dispatcher import Dispatcher
from apps.chat_sessions.services.session_service import SessionService
from apps.files.repository import FileRepositoryKV
from apps.files.services.file_service import FileService
from apps.kvstore.repository import InMemoryKeyValueStore
from apps.messaging.providers import BaseMessenger
from apps.usage.services.usage_service import UsageService

ADMIN_ID = '1001'
USER_ID = '2002'
OTHER_USER_ID = '3003'


@pytest.fixture
def bot_config():
    """Returns a BotConfig with one admin and the default page size."""
    return BotConfig(
        bot_token='123456789:AAHdqTcvCH1vGWJxfSeofSAs0K5PALDsawQ',
        bot_username='FileStoreBot',
        admin_ids=frozenset({ADMIN_ID}),
        page_size=5,
    )


@pytest.fixture
def kv_store():
    """Returns an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def file_repository(kv_store):
    return FileRepositoryKV(kv_store)


@pytest.fixture
def file_service(file_repository, bot_config):
    return FileService(file_repository, bot_config)


@pytest.fixture
def session_service(kv_store):
    return SessionService(kv_store)


@pytest.fixture
def usage_service(kv_store):
    return UsageService(kv_store)


@pytest.fixture
def mock_messenger():
    """Returns a mock messenger whose calls all succeed."""
    messenger = Mock(spec=BaseMessenger)
    messenger.send_message.return_value = {'message_id': 500}
    messenger.edit_message_text.return_value = {'message_id': 500}
    messenger.send_attachment.return_value = {'message_id': 501}
    messenger.answer_callback.return_value = True
    return messenger


@pytest.fixture
def dispatcher(bot_config, file_service, session_service, usage_service, mock_messenger):
    """Returns a Dispatcher wired to in-memory services and the mock messenger."""
    return Dispatcher(
        config=bot_config,
        files=file_service,
        sessions=session_service,
        usage=usage_service,
        messenger=mock_messenger,
    )
