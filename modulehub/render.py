"""
Rich rendering for --pretty output.

Commands hand domain objects to these functions; nothing here decides
what to show, only how. Module names and release text come from remote
feeds, so they are escaped before being mixed with markup.
"""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .domain import Module, ModuleCatalog, SelectionResult
from .services import MaterializationResult

console = Console()


def _table(title: str) -> Table:
    return Table(title=title, box=box.ROUNDED, show_header=True, header_style="bold magenta")


def render_module_table(catalog: ModuleCatalog) -> None:
    """Render the catalog's modules with their best version."""
    if not catalog:
        console.print("[yellow]No modules found.[/yellow]")
        return

    table = _table("Modules")
    table.add_column("Module", style="cyan")
    table.add_column("Versions", justify="right")
    table.add_column("Latest", style="dim")
    table.add_column("Best", style="green")

    for module in catalog:
        index = catalog.select_best(module.name)
        if index is None:
            best = "-"
        elif module.versions[index].compatible:
            best = escape(module.versions[index].tag)
        else:
            best = f"[red]{escape(module.versions[index].display_tag)}[/red]"
        table.add_row(escape(module.name), str(len(module.versions)), escape(module.latest_tag or ""), best)

    console.print(table)


def render_version_table(module: Module, selection: SelectionResult) -> None:
    """Render a module's versions in discovery order, marking the best one."""
    if not module.versions:
        console.print(f"[yellow]{escape(module.name)} has no versions.[/yellow]")
        return

    table = _table(escape(f"{module.name} versions"))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Version")
    table.add_column("Compatible")
    table.add_column("Download")

    for i, version in enumerate(module.versions):
        marker = "[bold green]>[/bold green] " if i == selection.index else "  "
        style = "green" if version.compatible else "red"
        table.add_row(
            str(i),
            f"{marker}[{style}]{escape(version.display_tag)}[/{style}]",
            "yes" if version.compatible else "no",
            "yes" if version.downloadable else "[dim]none[/dim]",
        )

    console.print(table)
    if selection.is_fallback:
        console.print("[yellow]No compatible version - showing default.[/yellow]")


def render_description(module_name: str, tag: str, description: str) -> None:
    console.print(Panel(Text(description), title=escape(f"{module_name} {tag}"), box=box.ROUNDED))


def render_install_result(result: MaterializationResult) -> None:
    """Summarize a finished install."""
    console.print(
        f"[green]Module downloaded and extracted to:[/green] {escape(result.target_dir)}",
        highlight=False,
    )
    console.print(f"  {len(result.files_written)} file(s) written", highlight=False)
    for entry, reason in result.skipped:
        console.print(f"  [yellow]skipped[/yellow] {escape(entry)} ({reason})", highlight=False)
