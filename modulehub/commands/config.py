"""
Handles the 'config' command group: inspect and initialize settings.
"""

import json

import click

from ..config import get_config_path, get_default_config, load_config, save_config

MASK = "***"


def masked(config):
    """Copy of config with credentials replaced by MASK."""
    shown = json.loads(json.dumps(config))
    if shown.get("github", {}).get("token"):
        shown["github"]["token"] = MASK
    return shown


@click.group("config")
def config_cmd():
    """Show or initialize the modulehub configuration."""


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Indented JSON instead of a single line")
@click.option("--path", is_flag=True, help="Only print which config file is read")
def show_config(pretty, path):
    """Print the effective configuration.

    Defaults, the config file and MODULEHUB_* environment variables are
    merged in that order. The GitHub token is never printed.
    """
    if path:
        click.echo(json.dumps({"config_path": str(get_config_path())}))
        return

    shown = masked(load_config())
    click.echo(json.dumps(shown, indent=2 if pretty else None, ensure_ascii=False))


@config_cmd.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
def init_config(force):
    """Write the default configuration to ~/.modulehub/config.json."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        click.echo(f"Configuration already exists at {config_path} (use --force to overwrite)")
        return
    written = save_config(get_default_config(), config_path)
    click.echo(f"Default configuration written to {written}")
