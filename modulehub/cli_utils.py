"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps

from .exit_codes import (
    INTERRUPTED,
    CommandError,
    MaterializationError,
    describe_failure,
    get_exit_code_for_exception,
)
from .output import emit_error


def standard_command(func):
    """
    Decorator that provides standard CLI error behavior:
    - CommandError subclasses exit with their own exit code
    - Other exceptions exit with a code mapped from their type
    - Errors are emitted as JSON on stderr
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            emit_error("Interrupted by user", kind="interrupted")
            sys.exit(INTERRUPTED)
        except (click.ClickException, click.Abort):
            # Click handles its own exit codes
            raise
        except MaterializationError as e:
            emit_error(str(e), kind=type(e).__name__, context={
                'downloaded': e.downloaded,
                'files_written': len(e.files_written),
                'detail': describe_failure(e),
            })
            sys.exit(e.exit_code)
        except CommandError as e:
            emit_error(str(e), kind=type(e).__name__)
            sys.exit(e.exit_code)
        except Exception as e:
            emit_error(f"Command failed: {e}", kind=type(e).__name__)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def get_hub(ctx: click.Context, refresh: bool = True):
    """
    Return the ModuleHub stored on the click context, building its
    catalog on first use.
    """
    from .api import ModuleHub

    obj = ctx.ensure_object(dict)
    hub = obj.get('hub')
    if hub is None:
        hub = ModuleHub(
            manifest_url=obj.get('manifest_url'),
            runtime_version=obj.get('runtime_version'),
            config=obj.get('config'),
        )
        obj['hub'] = hub
    if refresh and not obj.get('refreshed'):
        hub.refresh()
        obj['refreshed'] = True
    return hub


pretty_option = click.option('--pretty', is_flag=True, help='Display as a formatted table instead of JSONL')
