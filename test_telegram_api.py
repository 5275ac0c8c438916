"""
Test suite for the Telegram Bot API client.
Uses a mocked requests session; no network access.
"""
from unittest.mock import Mock

import pytest
import requests

from nudge.messaging.telegram_api import TelegramClient
from utils.error_handling import TelegramAPIError

TOKEN = "123456:SECRET-TOKEN"


def _response(payload, status_code=200):
    response = Mock(status_code=status_code)
    response.json.return_value = payload
    return response


def _client(*responses):
    session = Mock()
    session.post.side_effect = list(responses)
    sleep = Mock()
    return TelegramClient(TOKEN, session=session, sleep=sleep), session, sleep


def test_send_message_posts_payload():
    client, session, _ = _client(_response({"ok": True, "result": {"message_id": 9}}))

    result = client.send_message(-1001, "*hi*", parse_mode="Markdown")

    assert result == {"message_id": 9}
    url = session.post.call_args.args[0]
    assert url == f"https://api.telegram.org/bot{TOKEN}/sendMessage"
    assert session.post.call_args.kwargs["json"] == {
        "chat_id": -1001,
        "text": "*hi*",
        "disable_web_page_preview": True,
        "parse_mode": "Markdown",
    }


def test_api_error_raises_with_description():
    client, _, _ = _client(_response(
        {"ok": False, "error_code": 400, "description": "Bad Request: chat not found"}, status_code=400
    ))

    with pytest.raises(TelegramAPIError) as excinfo:
        client.send_message(-1001, "hi")

    assert excinfo.value.error_code == 400
    assert excinfo.value.description == "Bad Request: chat not found"


def test_rate_limit_retried_once():
    limited = _response(
        {"ok": False, "error_code": 429, "description": "Too Many Requests", "parameters": {"retry_after": 3}},
        status_code=429,
    )
    client, session, sleep = _client(limited, _response({"ok": True, "result": {"message_id": 1}}))

    assert client.send_message(-1001, "hi") == {"message_id": 1}
    sleep.assert_called_once_with(3)
    assert session.post.call_count == 2


def test_long_rate_limit_not_retried():
    limited = _response(
        {"ok": False, "error_code": 429, "description": "Too Many Requests", "parameters": {"retry_after": 600}},
        status_code=429,
    )
    client, session, sleep = _client(limited)

    with pytest.raises(TelegramAPIError):
        client.send_message(-1001, "hi")
    sleep.assert_not_called()


def test_network_error_does_not_leak_token():
    session = Mock()
    session.post.side_effect = requests.exceptions.ConnectionError(
        f"Max retries exceeded with url: /bot{TOKEN}/getMe"
    )
    client = TelegramClient(TOKEN, session=session)

    with pytest.raises(TelegramAPIError) as excinfo:
        client.get_me()

    assert TOKEN not in str(excinfo.value)
    assert "ConnectionError" in str(excinfo.value)


def test_non_json_response():
    response = Mock(status_code=502)
    response.json.side_effect = ValueError("no json")
    client, _, _ = _client(response)

    with pytest.raises(TelegramAPIError) as excinfo:
        client.get_me()
    assert excinfo.value.error_code == 502


def test_token_required():
    with pytest.raises(ValueError):
        TelegramClient("")
