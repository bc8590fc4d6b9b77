"""Tests for the HTTP client."""

import io
import threading
import unittest
from unittest.mock import MagicMock, patch

import pytest
import requests

from modulehub.infra import DownloadCancelled, HttpClient, HttpError


def mock_response(status_code=200, text="", chunks=(), headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.headers = headers if headers is not None else {}
    response.iter_content.return_value = iter(chunks)
    return response


class TestHttpClientSetup(unittest.TestCase):
    """Session headers and token lookup."""

    @patch.dict('os.environ', {}, clear=True)
    def test_no_token(self):
        client = HttpClient(user_agent="modulehub-test")
        self.assertIsNone(client.token)
        self.assertEqual(client.session.headers['User-Agent'], "modulehub-test")
        self.assertNotIn('Authorization', client.session.headers)

    @patch.dict('os.environ', {'GITHUB_TOKEN': 'gh-env'}, clear=True)
    def test_token_from_environment(self):
        client = HttpClient()
        self.assertEqual(client.token, 'gh-env')
        self.assertEqual(client.session.headers['Authorization'], 'token gh-env')

    @patch.dict('os.environ', {'GITHUB_TOKEN': 'gh-env', 'MODULEHUB_GITHUB_TOKEN': 'mh-env'}, clear=True)
    def test_own_variable_preferred(self):
        self.assertEqual(HttpClient().token, 'mh-env')

    @patch.dict('os.environ', {'GITHUB_TOKEN': 'gh-env'}, clear=True)
    def test_explicit_token_wins(self):
        self.assertEqual(HttpClient(token='explicit').token, 'explicit')


class TestFetchText:
    """Tests for HttpClient.fetch_text()."""

    def test_returns_body(self):
        client = HttpClient(timeout=5)
        with patch.object(client.session, 'get', return_value=mock_response(text="[]")) as mock_get:
            assert client.fetch_text("https://example.com/feed") == "[]"
        mock_get.assert_called_once_with("https://example.com/feed", timeout=5, stream=False)

    def test_non_2xx_raises(self):
        client = HttpClient()
        with patch.object(client.session, 'get', return_value=mock_response(status_code=404)):
            with pytest.raises(HttpError) as exc_info:
                client.fetch_text("https://example.com/feed")
        assert exc_info.value.status_code == 404
        assert exc_info.value.url == "https://example.com/feed"

    def test_transport_error_raises(self):
        client = HttpClient()
        with patch.object(client.session, 'get', side_effect=requests.ConnectionError("refused")):
            with pytest.raises(HttpError) as exc_info:
                client.fetch_text("https://example.com/feed")
        assert exc_info.value.status_code is None

    def test_rate_limit_tracked(self):
        client = HttpClient()
        headers = {
            'X-RateLimit-Remaining': '5',
            'X-RateLimit-Limit': '60',
            'X-RateLimit-Reset': '0',
            'X-RateLimit-Used': '55',
        }
        with patch.object(client.session, 'get', return_value=mock_response(headers=headers)):
            client.fetch_text("https://api.github.com/repos/o/r/releases")
        status = client.rate_limit_status
        assert status.remaining == 5
        assert status.limit == 60
        assert status.is_low
        assert status.minutes_until_reset == 0

    def test_missing_rate_limit_headers(self):
        client = HttpClient()
        with patch.object(client.session, 'get', return_value=mock_response()):
            client.fetch_text("https://pastebin.com/raw/x")
        assert client.rate_limit_status is None


class TestDownload:
    """Tests for HttpClient.download()."""

    def test_streams_chunks(self):
        client = HttpClient(chunk_size=4)
        response = mock_response(chunks=[b'abcd', b'', b'ef'])
        dest = io.BytesIO()
        with patch.object(client.session, 'get', return_value=response) as mock_get:
            written = client.download("https://example.com/a.zip", dest)

        assert written == 6
        assert dest.getvalue() == b'abcdef'
        assert mock_get.call_args.kwargs['stream'] is True
        response.iter_content.assert_called_once_with(chunk_size=4)
        response.close.assert_called()

    def test_cancelled(self):
        client = HttpClient()
        cancel = threading.Event()
        cancel.set()
        dest = io.BytesIO()
        with patch.object(client.session, 'get', return_value=mock_response(chunks=[b'abc'])):
            with pytest.raises(DownloadCancelled):
                client.download("https://example.com/a.zip", dest, cancel_event=cancel)
        assert dest.getvalue() == b''

    def test_error_status(self):
        client = HttpClient()
        with patch.object(client.session, 'get', return_value=mock_response(status_code=500)):
            with pytest.raises(HttpError):
                client.download("https://example.com/a.zip", io.BytesIO())

    def test_stream_interrupted(self):
        client = HttpClient()
        response = mock_response()
        response.iter_content.side_effect = requests.ConnectionError("reset")
        with patch.object(client.session, 'get', return_value=response):
            with pytest.raises(HttpError, match="failed"):
                client.download("https://example.com/a.zip", io.BytesIO())
