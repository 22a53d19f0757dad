"""
Tests for the Telegram webhook endpoint.
"""
import json
import pytest
from dataclasses import replace
from unittest.mock import patch
from django.apps import apps
from django.urls import reverse
from apps.kvstore.models import KeyValue
from .factories import message_update

WEBHOOK_URL = '/webhook/'


@pytest.fixture(autouse=True)
def bot_app_config(bot_config):
    """Points the bot app at the test configuration for the duration of a test."""
    app_config = apps.get_app_config('bot')
    original = app_config.bot_config
    app_config.bot_config = bot_config
    yield app_config
    app_config.bot_config = original


@pytest.fixture
def mock_build_dispatcher():
    with patch('apps.bot.views.build_dispatcher') as mock_build:
        yield mock_build


@pytest.fixture
def webhook_secret(bot_app_config):
    """Configures a webhook secret on the bot app."""
    bot_app_config.bot_config = replace(bot_app_config.bot_config, webhook_secret='s3cret-token')
    return 's3cret-token'


def post_update(client, payload, **headers):
    return client.post(WEBHOOK_URL, data=json.dumps(payload), content_type='application/json', headers=headers)


def test_url_name():
    assert reverse('bot:webhook') == WEBHOOK_URL


def test_get_is_not_allowed(client, mock_build_dispatcher):
    response = client.get(WEBHOOK_URL)

    assert response.status_code == 405
    mock_build_dispatcher.assert_not_called()


def test_invalid_json_is_rejected(client, mock_build_dispatcher):
    response = client.post(WEBHOOK_URL, data='{not json', content_type='application/json')

    assert response.status_code == 400
    assert response.content == b'Invalid Request Body'
    mock_build_dispatcher.assert_not_called()


def test_update_is_dispatched(client, mock_build_dispatcher):
    payload = message_update(2002, text="/start")

    response = post_update(client, payload)

    assert response.status_code == 200
    assert response.content == b'OK'
    mock_build_dispatcher.return_value.dispatch.assert_called_once_with(payload)


def test_dispatch_errors_still_return_ok(client, mock_build_dispatcher):
    mock_build_dispatcher.return_value.dispatch.side_effect = RuntimeError("store down")

    response = post_update(client, message_update(2002, text="/start"))

    assert response.status_code == 200
    assert response.content == b'OK'


def test_messenger_misconfiguration_still_returns_ok(client, mock_build_dispatcher):
    mock_build_dispatcher.side_effect = ValueError("Invalid Telegram bot configuration")

    response = post_update(client, message_update(2002, text="/start"))

    assert response.status_code == 200


def test_missing_secret_is_forbidden(client, mock_build_dispatcher, webhook_secret):
    response = post_update(client, message_update(2002, text="/start"))

    assert response.status_code == 403
    mock_build_dispatcher.assert_not_called()


def test_wrong_secret_is_forbidden(client, mock_build_dispatcher, webhook_secret):
    response = post_update(client, message_update(2002, text="/start"), **{'X-Telegram-Bot-Api-Secret-Token': 'nope'})

    assert response.status_code == 403


def test_matching_secret_is_accepted(client, mock_build_dispatcher, webhook_secret):
    response = post_update(
        client, message_update(2002, text="/start"), **{'X-Telegram-Bot-Api-Secret-Token': webhook_secret}
    )

    assert response.status_code == 200
    mock_build_dispatcher.return_value.dispatch.assert_called_once()


@pytest.mark.django_db
def test_end_to_end_with_database_store(client):
    """A real update runs through the Django-backed store; only HTTP is mocked."""
    with patch('apps.messaging.providers.telegram.telegram_messenger.httpx.Client.post') as mock_post:
        mock_post.return_value.status_code = 200
        mock_post.return_value.json.return_value = {'ok': True, 'result': {'message_id': 1}}

        response = post_update(client, message_update(2002, text="/start post=doesnotexist"))

    assert response.status_code == 200
    url = mock_post.call_args.args[0]
    assert url.endswith('/sendMessage')
    assert mock_post.call_args.kwargs['json']['text'] == "❌ No file found for post ID: doesnotexist"

    assert KeyValue.objects.filter(key='session:2002').exists()
    assert KeyValue.objects.filter(key='usage:action:start').exists()
