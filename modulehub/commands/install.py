"""
Handles the 'install' command: download and extract a module version.
"""

import click

from ..cli_utils import standard_command, get_hub
from ..output import emit
from ..render import render_install_result


@click.command(name='install')
@click.argument('name')
@click.option('--version', 'version', default=None, help='Version tag (default: best compatible)')
@click.option('--target', type=click.Path(file_okay=False), default=None,
              help='Base directory for modules (default: install.directory from config)')
@click.option('-y', '--yes', is_flag=True, help='Install incompatible versions without asking')
@click.option('--pretty', is_flag=True, help='Human-readable output')
@click.pass_context
@standard_command
def install_handler(ctx, name, version, target, yes, pretty):
    """Download module NAME and extract it into its module directory.

    \b
    Examples:
        modulehub install "Echelon (Chat)"
        modulehub install "Echelon (Chat)" --version v1.2.0
        modulehub install "Echelon (Chat)" --target ./modules
    """
    hub = get_hub(ctx)
    name = hub.get_module(name).name
    selected = hub.resolve_version(name, version)

    if not selected.compatible and not yes:
        click.confirm(
            f"{name} {selected.tag} is marked as incompatible with runtime "
            f"{hub.runtime_version}. Do you want to proceed?",
            abort=True,
            err=True,
        )

    result = hub.install(name, version=version, base_dir=target)

    if pretty:
        render_install_result(result)
    else:
        emit([{'name': name, 'version': selected.tag, **result.to_dict()}])
