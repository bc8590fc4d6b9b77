"""
Archive materialization service for modulehub.

Downloads a version's zip archive and extracts it into a module directory.

GitHub zipballs wrap everything in a synthetic root folder such as
"owner-Repo-1a2b3c/". Entry paths are rewritten relative to the module
name so that root disappears:

    root-abc123/my-module/src/File.txt  ->  <target>/src/File.txt

Entries that do not contain the module name keep only their base file
name. Directory entries, entries resolving to an empty name and entries
escaping the target directory are skipped.
"""

import logging
import os
import shutil
import tempfile
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..exit_codes import GENERAL_ERROR, NETWORK_ERROR, PERMISSION_ERROR, MaterializationError
from ..infra import ArchiveError, HttpClient, HttpError, ZipArchiveReader

logger = logging.getLogger(__name__)

_SEPARATORS = '/\\'


def resolve_entry_name(entry_path: str, module_name: str) -> str:
    """
    Map an archive entry path to its path relative to the target directory.

    Returns an empty string when the entry should be skipped.
    """
    # An entry that is nothing but the module root has no file name
    if entry_path.strip(_SEPARATORS) == module_name:
        return ''

    new_name = ''
    index = entry_path.find(module_name) if module_name else -1
    if index != -1:
        new_name = entry_path[index + len(module_name):].lstrip(_SEPARATORS)

    if not new_name:
        new_name = entry_path.replace('\\', '/').rstrip('/').rsplit('/', 1)[-1]

    return new_name


def safe_join(target_dir: Path, relative: str) -> Optional[Path]:
    """Join relative onto target_dir, or None if the result escapes it."""
    base = target_dir.resolve()
    candidate = (base / relative.replace('\\', '/')).resolve()
    if candidate == base or base not in candidate.parents:
        return None
    return candidate


@dataclass
class MaterializationResult:
    """Files written and entries skipped by one materialization."""
    target_dir: str
    files_written: List[str] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)  # (entry, reason)
    bytes_downloaded: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'target_dir': self.target_dir,
            'files_written': list(self.files_written),
            'skipped': [{'entry': e, 'reason': r} for e, r in self.skipped],
            'bytes_downloaded': self.bytes_downloaded,
        }


class ArchiveMaterializer:
    """
    Downloads and extracts module archives.

    Each call uses its own temporary file, so concurrent materializations
    into different target directories do not interfere.

    Example:
        materializer = ArchiveMaterializer(HttpClient())
        result = materializer.materialize(version.download_url, "~/modules/chat", "Chat")
        print(f"{len(result.files_written)} files extracted")
    """

    def __init__(self, http_client: Optional[HttpClient] = None):
        self.http = http_client or HttpClient()

    def materialize(
        self,
        download_url: str,
        target_dir: Union[str, Path],
        module_name: str,
        cancel_event: Optional[threading.Event] = None
    ) -> MaterializationResult:
        """
        Download an archive and extract it into target_dir.

        Args:
            download_url: Archive URL; must be non-empty
            target_dir: Directory to extract into (created if missing)
            module_name: Name used to strip the archive's root folder
            cancel_event: When set, download and extraction stop

        Returns:
            MaterializationResult

        Raises:
            MaterializationError: On a missing URL, download failure,
                corrupt archive, filesystem error or cancellation
        """
        if not download_url:
            raise MaterializationError(f"No download URL available for {module_name}")

        target = Path(target_dir).expanduser()
        result = MaterializationResult(target_dir=str(target))

        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            code = PERMISSION_ERROR if isinstance(e, PermissionError) else GENERAL_ERROR
            raise MaterializationError(f"Cannot create {target}: {e}", exit_code=code) from e

        try:
            fd, temp_path = tempfile.mkstemp(prefix="module", suffix=".zip")
        except OSError as e:
            raise MaterializationError(f"Cannot create temporary archive: {e}") from e

        try:
            try:
                with os.fdopen(fd, 'wb') as temp_file:
                    result.bytes_downloaded = self.http.download(download_url, temp_file, cancel_event)
            except HttpError as e:
                raise MaterializationError(
                    f"Download failed for {module_name}: {e}",
                    exit_code=NETWORK_ERROR
                ) from e
            except OSError as e:
                raise MaterializationError(f"Cannot write temporary archive: {e}") from e

            self._extract(Path(temp_path), target, module_name, result, cancel_event)
        finally:
            try:
                os.unlink(temp_path)
            except OSError as e:
                logger.debug(f"Could not remove temporary archive {temp_path}: {e}")

        logger.info(
            f"Extracted {len(result.files_written)} file(s) for {module_name} into {target}"
        )
        return result

    def _extract(
        self,
        archive_path: Path,
        target: Path,
        module_name: str,
        result: MaterializationResult,
        cancel_event: Optional[threading.Event]
    ) -> None:
        """Extract entries, recording progress in result as it goes."""
        try:
            with ZipArchiveReader(archive_path) as archive:
                for entry in archive.entries():
                    if cancel_event is not None and cancel_event.is_set():
                        raise MaterializationError(
                            f"Extraction of {module_name} cancelled",
                            downloaded=True,
                            files_written=result.files_written
                        )
                    if entry.is_dir:
                        continue

                    name = resolve_entry_name(entry.path, module_name)
                    if not name:
                        result.skipped.append((entry.path, 'empty name'))
                        continue

                    out_path = safe_join(target, name)
                    if out_path is None:
                        logger.warning(f"Skipping unsafe archive entry {entry.path!r}")
                        result.skipped.append((entry.path, 'outside target directory'))
                        continue

                    out_path.parent.mkdir(parents=True, exist_ok=True)
                    with entry.open() as src, open(out_path, 'wb') as dst:
                        shutil.copyfileobj(src, dst)
                    result.files_written.append(str(out_path))
        except ArchiveError as e:
            raise MaterializationError(
                f"Corrupt archive for {module_name}: {e}",
                downloaded=True,
                files_written=result.files_written
            ) from e
        except OSError as e:
            raise MaterializationError(
                f"Cannot write files for {module_name}: {e}",
                downloaded=True,
                files_written=result.files_written
            ) from e
