"""
Exit codes and the error hierarchy for modulehub commands.

Codes 0-2 keep their shell meaning; modulehub's own failures use the
64-113 range left free for applications.
"""
from typing import Sequence

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2             # bad arguments, unknown module or version

NO_MODULES_FOUND = 64       # the catalog came back empty
CONFIG_ERROR = 66           # unreadable or invalid configuration
PERMISSION_ERROR = 67       # install directory not writable
NETWORK_ERROR = 68          # root manifest or archive download failed
DATA_ERROR = 70             # malformed data reached a command
INTERRUPTED = 130           # Ctrl+C

# Fallback codes for exceptions that are not CommandErrors, by class name
EXCEPTION_EXIT_CODES = {
    'PermissionError': PERMISSION_ERROR,
    'IsADirectoryError': PERMISSION_ERROR,
    'ConnectionError': NETWORK_ERROR,
    'TimeoutError': NETWORK_ERROR,
    'HttpError': NETWORK_ERROR,
    'JSONDecodeError': DATA_ERROR,
    'ValueError': DATA_ERROR,
    'KeyError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """Exit code for an exception: its own for CommandErrors, else by class name."""
    if isinstance(exc, CommandError):
        return exc.exit_code
    return EXCEPTION_EXIT_CODES.get(type(exc).__name__, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class NoModulesFoundError(CommandError):
    """Raised when the catalog has nothing to show."""
    def __init__(self, message: str = "No modules found"):
        super().__init__(message, NO_MODULES_FOUND)


class ModuleNotFoundInCatalog(CommandError):
    """Raised when a requested module or version is not in the catalog."""
    def __init__(self, message: str):
        super().__init__(message, USAGE_ERROR)


class FatalAggregationError(CommandError):
    """Raised when the root manifest cannot be fetched; no catalog is built."""
    def __init__(self, message: str, url: str = ""):
        super().__init__(message, NETWORK_ERROR)
        self.url = url


class SourceError(Exception):
    """
    One release source failed to fetch or parse.

    Never propagated past the aggregator: it is logged and the source
    contributes nothing.
    """
    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class MaterializationError(CommandError):
    """
    Raised when a download-and-extract fails.

    Attributes:
        downloaded: Whether the archive was fully downloaded
        files_written: Files already extracted before the failure
    """
    def __init__(
        self,
        message: str,
        downloaded: bool = False,
        files_written: Sequence[str] = (),
        exit_code: int = GENERAL_ERROR
    ):
        super().__init__(message, exit_code)
        self.downloaded = downloaded
        self.files_written = tuple(files_written)

    @property
    def partial(self) -> bool:
        """True when some files were extracted before the failure."""
        return bool(self.files_written)


def describe_failure(exc: MaterializationError) -> str:
    """Human-readable note on what was left on disk."""
    if not exc.downloaded:
        return "Nothing was downloaded."
    if exc.partial:
        return f"Partial extraction: {len(exc.files_written)} file(s) were written."
    return "Archive downloaded but no files were extracted."
