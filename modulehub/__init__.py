"""
modulehub - A catalog and installer for modules published as GitHub releases.

modulehub reads a root manifest listing release feeds, merges their
releases into one deduplicated catalog, classifies each release against
a runtime version, and downloads and extracts the version you pick.

Quick Start:
    import modulehub

    hub = modulehub.ModuleHub(runtime_version="1.0")
    hub.refresh()

    for module in hub.modules():
        best = hub.best_version_index(module.name)
        print(module.name, module.versions[best].display_tag)

    hub.install("Echelon (Chat)")

Domain Objects:
    ReleaseSource - A release feed URL and the module it names
    Release - One entry of a release feed
    Version - A release classified for the catalog
    Module - All versions of one logical module
    ModuleCatalog - The immutable result of an aggregation run

Services:
    ManifestAggregator - Root manifest -> ModuleCatalog
    ArchiveMaterializer - Version archive -> files on disk
"""

__version__ = "0.3.0"

# High-level API
from .api import ModuleHub, create

# Domain objects
from .domain import (
    ReleaseSource,
    Release,
    Version,
    Module,
    ModuleCatalog,
    select_best_index,
)

# Services (for advanced use)
from .services import (
    ManifestAggregator,
    ArchiveMaterializer,
    MaterializationResult,
)

# Core rules
from .versioning import compare_versions
from .compat import is_compatible
from .naming import resolve_name, UNKNOWN_MODULE

# Errors
from .exit_codes import FatalAggregationError, SourceError, MaterializationError

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # High-level API
    "ModuleHub",
    "create",
    # Domain objects
    "ReleaseSource",
    "Release",
    "Version",
    "Module",
    "ModuleCatalog",
    "select_best_index",
    # Services
    "ManifestAggregator",
    "ArchiveMaterializer",
    "MaterializationResult",
    # Core rules
    "compare_versions",
    "is_compatible",
    "resolve_name",
    "UNKNOWN_MODULE",
    # Errors
    "FatalAggregationError",
    "SourceError",
    "MaterializationError",
    # Configuration
    "load_config",
    "save_config",
]
