"""
Service layer for modulehub.

Contains the operations that orchestrate domain objects and infrastructure:
- ManifestAggregator: Root manifest and release feeds -> ModuleCatalog
- ArchiveMaterializer: Version archive -> files on disk

Services are the primary API for commands to use.
"""

from .aggregator import ManifestAggregator, AggregationReport, split_manifest, parse_releases
from .materializer import (
    ArchiveMaterializer,
    MaterializationResult,
    resolve_entry_name,
    safe_join,
)

__all__ = [
    'ManifestAggregator',
    'AggregationReport',
    'split_manifest',
    'parse_releases',
    'ArchiveMaterializer',
    'MaterializationResult',
    'resolve_entry_name',
    'safe_join',
]
