"""
Handles the 'versions' and 'show' commands for a single module.
"""

import click

from ..cli_utils import standard_command, get_hub, pretty_option
from ..output import emit, emit_notice
from ..render import render_version_table, render_description


@click.command(name='versions')
@click.argument('name')
@pretty_option
@click.pass_context
@standard_command
def versions_handler(ctx, name, pretty):
    """List the versions of module NAME in discovery order.

    The best compatible version is marked; when no version is
    compatible the first one is marked instead.
    """
    hub = get_hub(ctx)
    module = hub.get_module(name)
    selection = hub.best_version(name)

    if pretty:
        render_version_table(module, selection)
        return

    for i, version in enumerate(module.versions):
        data = version.to_dict()
        data.pop('description', None)
        data['index'] = i
        data['selected'] = i == selection.index
        emit([data])
    if selection.is_fallback:
        emit_notice('No compatible version - showing default', index=selection.index)


@click.command(name='show')
@click.argument('name')
@click.option('--version', 'version', default=None, help='Version tag (default: best compatible)')
@pretty_option
@click.pass_context
@standard_command
def show_handler(ctx, name, version, pretty):
    """Show the description of a version of module NAME."""
    hub = get_hub(ctx)
    selected = hub.resolve_version(name, version)

    if pretty:
        render_description(name, selected.display_tag, selected.description)
    else:
        emit([{'name': name, **selected.to_dict()}])
