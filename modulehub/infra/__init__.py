"""
Infrastructure layer for modulehub.

Contains abstractions for external systems:
- HttpClient: GET requests for manifests, feeds and archives
- ZipArchiveReader: Sequential access to downloaded archives

These provide clean interfaces that can be mocked for testing.
"""

from .http_client import HttpClient, HttpError, DownloadCancelled, RateLimitStatus
from .archive import ZipArchiveReader, ArchiveEntry, ArchiveError

__all__ = [
    'HttpClient',
    'HttpError',
    'DownloadCancelled',
    'RateLimitStatus',
    'ZipArchiveReader',
    'ArchiveEntry',
    'ArchiveError',
]
