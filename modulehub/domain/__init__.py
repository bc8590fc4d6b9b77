"""
Domain layer for modulehub.

Contains pure domain objects with no I/O or side effects:
- ReleaseSource: A release feed URL and the module it names
- Release: One entry of a release feed
- Version: A release classified for the catalog
- Module: All versions of one logical module
- ModuleCatalog: The immutable result of an aggregation run

These objects are immutable and provide to_dict() for JSONL output.
"""

from .module import ReleaseSource, Release, Version, Module
from .catalog import (
    ModuleCatalog,
    CatalogBuilder,
    SelectionResult,
    select_best,
    select_best_index,
    select_best_display_index,
)

__all__ = [
    'ReleaseSource',
    'Release',
    'Version',
    'Module',
    'ModuleCatalog',
    'CatalogBuilder',
    'SelectionResult',
    'select_best',
    'select_best_index',
    'select_best_display_index',
]
