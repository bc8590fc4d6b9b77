#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("modulehub")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. MODULEHUB_CONFIG environment variable
    2. ~/.modulehub/ directory
    """
    if 'MODULEHUB_CONFIG' in os.environ:
        path = Path(os.environ['MODULEHUB_CONFIG']).expanduser()
        if path.exists():
            return path

    config_dir = Path.home() / '.modulehub'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "manifest": {
            "url": "https://pastebin.com/raw/cPymZmpb",
            "runtime_version": "1.0"
        },
        "http": {
            "timeout_seconds": 30,
            "user_agent": "modulehub"
        },
        "github": {
            "token": ""
        },
        "aggregation": {
            "max_workers": 4
        },
        "install": {
            "directory": "~/Documents/echelon/desktop/module"
        },
        "logging": {
            "level": "INFO"
        }
    }


def _read_config_file(config_path: Path) -> dict:
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        import yaml
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(config_path=None, strict=False):
    """Load configuration: defaults, then file, then environment overrides.

    Args:
        config_path: Explicit config file (default: get_config_path())
        strict: Raise ConfigError on an unreadable file instead of logging it
    """
    config_path = Path(config_path).expanduser() if config_path else get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if not isinstance(file_config, dict):
                raise ValueError("top level must be a mapping")
            config = merge_configs(config, file_config)
        except Exception as e:
            if strict:
                raise ConfigError(f"Error loading config from {config_path}: {e}") from e
            logger.error(f"Error loading config from {config_path}: {e}")

    return apply_env_overrides(config)


def save_config(config, config_path=None):
    """Save configuration to file."""
    config_path = Path(config_path).expanduser() if config_path else get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        # tomllib is read-only
        import toml
        with open(config_path, 'w') as f:
            toml.dump(config, f)
    elif suffix in ('.yaml', '.yml'):
        import yaml
        with open(config_path, 'w') as f:
            yaml.safe_dump(config, f, default_flow_style=False)
    else:
        with open(config_path, 'w') as f:
            json.dump(config, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def merge_configs(base, override):
    """Deep-merge override into a copy of base; sections merge, values replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = merge_configs(current, value)
        merged[key] = value
    return merged


def _coerce_env_value(value):
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: MODULEHUB_SECTION_KEY
    For example: MODULEHUB_MANIFEST_RUNTIME_VERSION=2.0
    """
    env_prefix = "MODULEHUB_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == 'MODULEHUB_CONFIG':
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')
        # Version strings like "2.0" must stay strings
        typed_value = value if key_parts[-1] == 'version' else _coerce_env_value(value)

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                # Path conflict: env var is longer than the config path
                break

    return config


def set_log_level(level):
    """Set the modulehub logger level from a name such as "DEBUG"."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {level}")
    logger.setLevel(level)


def get_runtime_version(config):
    return str(config.get('manifest', {}).get('runtime_version', '1.0'))


def get_manifest_url(config):
    url = config.get('manifest', {}).get('url', '')
    if not url:
        raise ConfigError("No manifest URL configured (manifest.url)")
    return url


def get_install_directory(config):
    return Path(config.get('install', {}).get('directory', '~/Documents/echelon/desktop/module')).expanduser()
