#!/usr/bin/env python3

import logging

import click

from modulehub.config import load_config, set_log_level, logger
from modulehub.exit_codes import ConfigError
from modulehub.commands.list import list_handler
from modulehub.commands.versions import versions_handler, show_handler
from modulehub.commands.install import install_handler
from modulehub.commands.config import config_cmd


@click.group()
@click.version_option(package_name='modulehub')
@click.option('--manifest-url', envvar='MODULEHUB_MANIFEST_URL', default=None,
              help='Root manifest URL (overrides manifest.url)')
@click.option('--runtime-version', default=None,
              help='Runtime version releases must declare (overrides manifest.runtime_version)')
@click.option('-v', '--verbose', is_flag=True, help='Debug logging on stderr')
@click.pass_context
def cli(ctx, manifest_url, runtime_version, verbose):
    """modulehub - Browse and install modules published as GitHub releases.

    Reads a root manifest listing release feeds, merges the releases
    into one catalog, and downloads the version you pick.
    """
    config = load_config()
    try:
        set_log_level(logging.DEBUG if verbose else config.get('logging', {}).get('level', 'INFO'))
    except ConfigError as e:
        logger.warning(f"{e}; using INFO")

    obj = ctx.ensure_object(dict)
    obj.setdefault('config', config)
    obj.setdefault('manifest_url', manifest_url)
    obj.setdefault('runtime_version', runtime_version)


cli.add_command(list_handler)
cli.add_command(versions_handler)
cli.add_command(show_handler)
cli.add_command(install_handler)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
