"""
Archive reading infrastructure for modulehub.

Wraps zipfile as a sequential entry iterator so extraction logic only
sees (path, is_dir, content stream) triples.
"""

import zipfile
import zlib
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterator, Optional, Union


class ArchiveError(Exception):
    """The archive is missing, unreadable or corrupt."""


# Unsupported compression raises NotImplementedError, encrypted entries RuntimeError
_ENTRY_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    EOFError,
    zlib.error,
    NotImplementedError,
    RuntimeError,
)


@dataclass(frozen=True)
class ArchiveEntry:
    """One stored entry of an archive."""
    path: str
    is_dir: bool
    size: int
    _info: zipfile.ZipInfo
    _zip: zipfile.ZipFile

    @contextmanager
    def open(self) -> Iterator[IO[bytes]]:
        """Open the entry's content as a binary stream."""
        try:
            with self._zip.open(self._info, 'r') as stream:
                yield stream
        except _ENTRY_ERRORS as e:
            raise ArchiveError(f"Cannot read entry {self.path!r}: {e}") from e


class ZipArchiveReader:
    """
    Sequential reader over a zip file.

    Example:
        with ZipArchiveReader(path) as archive:
            for entry in archive.entries():
                if not entry.is_dir:
                    with entry.open() as src:
                        data = src.read()
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._zip: Optional[zipfile.ZipFile] = None

    def __enter__(self) -> 'ZipArchiveReader':
        try:
            self._zip = zipfile.ZipFile(self.path, 'r')
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveError(f"Cannot open archive {self.path}: {e}") from e
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield entries in stored order."""
        if self._zip is None:
            raise ArchiveError("Archive is not open")
        for info in self._zip.infolist():
            yield ArchiveEntry(
                path=info.filename,
                is_dir=info.is_dir(),
                size=info.file_size,
                _info=info,
                _zip=self._zip,
            )
