"""
Handles the 'list' command for displaying the module catalog.

- Default output is JSONL, one module per line
- --pretty renders a table
- --report adds a summary line with per-source failures
"""

import click
from rich.markup import escape

from ..cli_utils import standard_command, get_hub, pretty_option
from ..exit_codes import NoModulesFoundError
from ..output import emit
from ..render import render_module_table, console


def module_summary(catalog, module):
    """Summary row for one module, as emitted by 'list'."""
    index = catalog.select_best(module.name)
    best = module.versions[index] if index is not None else None
    return {
        'name': module.name,
        'versions': len(module.versions),
        'latest_tag': module.latest_tag,
        'best_version': best.tag if best else None,
        'best_compatible': best.compatible if best else False,
    }


@click.command(name='list')
@pretty_option
@click.option('--report', is_flag=True, help='Also show which sources failed')
@click.pass_context
@standard_command
def list_handler(ctx, pretty, report):
    """List modules from every source in the root manifest.

    \b
    Examples:
        modulehub list
        modulehub list --pretty
        modulehub --runtime-version 2.0 list
    """
    hub = get_hub(ctx)
    catalog = hub.catalog

    if pretty:
        render_module_table(catalog)
        if report and hub.last_report:
            for url, reason in hub.last_report.failed.items():
                console.print(f"[red]Source failed:[/red] {escape(url)} ({escape(reason)})", highlight=False)
    else:
        emit(module_summary(catalog, m) for m in catalog)
        if report and hub.last_report:
            emit([{'report': hub.last_report.to_dict()}])

    if not catalog:
        raise NoModulesFoundError()
