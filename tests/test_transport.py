from unittest.mock import MagicMock, call, patch

import pytest
import requests

import transport
from transport import TransportError, fetch, fetch_json, fetch_text


def _ok(json_body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = json_body
    response.text = text
    return response


def _status_error(code: int) -> MagicMock:
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError(f"{code} Server Error")
    return response


def test_fetch_json_returns_parsed_body() -> None:
    with patch("transport.requests.get", return_value=_ok({"a": 1})) as mock_get, \
         patch("transport.time.sleep") as mock_sleep:
        assert fetch_json("https://example.org/x") == {"a": 1}

    assert mock_get.call_count == 1
    mock_sleep.assert_not_called()
    assert mock_get.call_args.kwargs["headers"]["User-Agent"] == transport.USER_AGENT


def test_fetch_text_returns_raw_text() -> None:
    with patch("transport.requests.get", return_value=_ok(text="<rss/>")), \
         patch("transport.time.sleep"):
        assert fetch_text("https://example.org/feed") == "<rss/>"


def test_non_2xx_is_retried_then_succeeds() -> None:
    with patch("transport.requests.get", side_effect=[_status_error(503), _ok({"ok": True})]) as mock_get, \
         patch("transport.time.sleep") as mock_sleep:
        assert fetch("https://example.org/x") == {"ok": True}

    assert mock_get.call_count == 2
    mock_sleep.assert_called_once_with(transport.BACKOFF_SECONDS * 1)


def test_backoff_grows_linearly_and_final_error_is_chained() -> None:
    errors = [
        requests.ConnectionError("first"),
        requests.ConnectionError("second"),
        requests.ConnectionError("third"),
    ]
    with patch("transport.requests.get", side_effect=errors) as mock_get, \
         patch("transport.time.sleep") as mock_sleep:
        with pytest.raises(TransportError) as excinfo:
            fetch_text("https://example.org/down")

    assert mock_get.call_count == transport.MAX_ATTEMPTS == 3
    assert mock_sleep.call_args_list == [
        call(transport.BACKOFF_SECONDS * 1),
        call(transport.BACKOFF_SECONDS * 2),
    ]
    assert str(excinfo.value.__cause__) == "third"


def test_undecodable_json_is_retried() -> None:
    bad = _ok()
    bad.json.side_effect = ValueError("not json")

    with patch("transport.requests.get", side_effect=[bad, _ok([1, 2])]), \
         patch("transport.time.sleep"):
        assert fetch_json("https://example.org/x") == [1, 2]
