"""
HTTP client infrastructure for modulehub.

Provides the two GET operations the rest of the system needs:
- fetch_text(): manifest and release-feed bodies
- download(): streamed archive download into an open file

Tracks GitHub rate-limit headers and warns when the budget runs low.
Failures are raised as HttpError; nothing is retried here.
"""

import logging
import os
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Mapping, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "modulehub"
DEFAULT_CHUNK_SIZE = 8192


class HttpError(Exception):
    """A GET failed: transport error or non-2xx status."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DownloadCancelled(HttpError):
    """A streamed download was interrupted through its cancel event."""

    def __init__(self, url: str):
        super().__init__(url, f"Download cancelled: {url}")


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def reset_datetime(self) -> datetime:
        """Get reset time as datetime."""
        return datetime.fromtimestamp(self.reset_time)

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 10 remaining)."""
        return self.remaining < 10


class HttpClient:
    """
    Plain GET client backed by a requests.Session.

    Example:
        client = HttpClient(timeout=10)
        text = client.fetch_text("https://pastebin.com/raw/cPymZmpb")
    """

    def __init__(
        self,
        timeout: float = 30,
        token: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ):
        """
        Initialize HttpClient.

        Args:
            timeout: Per-request timeout in seconds
            token: GitHub token (defaults to MODULEHUB_GITHUB_TOKEN or GITHUB_TOKEN env var)
            user_agent: User-Agent header value
            chunk_size: Read size for streamed downloads
        """
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.token = token or os.environ.get('MODULEHUB_GITHUB_TOKEN') or os.environ.get('GITHUB_TOKEN')
        self.session = requests.Session()
        self.session.headers.update({'User-Agent': user_agent})
        if self.token:
            self.session.headers['Authorization'] = f'token {self.token}'
        self._rate_limit_status: Optional[RateLimitStatus] = None

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Status from the last response that carried rate-limit headers."""
        return self._rate_limit_status

    def _update_rate_limit_from_headers(self, headers: Mapping[str, str]) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))
        except (ValueError, TypeError):
            return

        if remaining < 0 or limit < 0:
            return

        self._rate_limit_status = RateLimitStatus(
            remaining=remaining,
            limit=limit,
            reset_time=reset_time,
            used=used
        )
        if self._rate_limit_status.is_low:
            logger.warning(
                f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
            )

    def _get(self, url: str, stream: bool = False) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.timeout, stream=stream)
        except requests.RequestException as e:
            raise HttpError(url, f"GET {url} failed: {e}") from e

        headers = getattr(response, 'headers', None)
        if isinstance(headers, Mapping):
            self._update_rate_limit_from_headers(headers)

        if not 200 <= response.status_code < 300:
            response.close()
            raise HttpError(
                url,
                f"GET {url} returned HTTP {response.status_code}",
                status_code=response.status_code
            )
        return response

    def fetch_text(self, url: str) -> str:
        """
        Fetch a URL and return its body as text.

        Raises:
            HttpError: On transport failure or non-2xx status
        """
        logger.debug(f"Fetching {url}")
        response = self._get(url)
        return response.text

    def download(
        self,
        url: str,
        dest: BinaryIO,
        cancel_event: Optional[threading.Event] = None
    ) -> int:
        """
        Stream a URL's bytes into an open binary file.

        Args:
            url: URL to download
            dest: Writable binary file object
            cancel_event: When set, the download stops with DownloadCancelled

        Returns:
            Number of bytes written

        Raises:
            HttpError: On transport failure, non-2xx status or cancellation
        """
        logger.debug(f"Downloading {url}")
        response = self._get(url, stream=True)
        written = 0
        try:
            for chunk in response.iter_content(chunk_size=self.chunk_size):
                if cancel_event is not None and cancel_event.is_set():
                    raise DownloadCancelled(url)
                if chunk:
                    dest.write(chunk)
                    written += len(chunk)
        except requests.RequestException as e:
            raise HttpError(url, f"Download of {url} failed: {e}") from e
        finally:
            response.close()

        logger.debug(f"Downloaded {written} bytes from {url}")
        return written

    def close(self) -> None:
        self.session.close()
