"""
Manifest aggregation service for modulehub.

Builds a ModuleCatalog from a root manifest:

1. The root manifest is a run of source URLs. A new URL starts at every
   occurrence of "https://"; no other delimiter is needed.
2. Each source is a release feed (a JSON array of GitHub release objects).
   Sources are fetched independently, optionally in parallel.
3. Releases are classified against the runtime version and merged by
   module name, in manifest order.

Only a root manifest failure is fatal. A failing source is logged and
contributes nothing.
"""

import json
import logging
import re
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..domain import CatalogBuilder, ModuleCatalog, Release, ReleaseSource, Version
from ..exit_codes import FatalAggregationError, SourceError
from ..infra import HttpClient, HttpError

logger = logging.getLogger(__name__)

URL_PREFIX = "https://"

# Zero-width split before every URL prefix
_URL_BOUNDARY = re.compile(r'(?=' + re.escape(URL_PREFIX) + r')')


def split_manifest(text: str) -> List[str]:
    """
    Tokenize a root manifest into source URLs.

    A prefix occurring inside unrelated text also starts a new token;
    the manifest format has no way to escape it.
    """
    return [part.strip() for part in _URL_BOUNDARY.split(text.strip()) if part.strip()]


def parse_releases(url: str, content: str) -> List[Dict[str, Any]]:
    """
    Parse a feed body as a JSON array of release objects.

    Raises:
        SourceError: If the body is not valid JSON or not an array
    """
    try:
        data = json.loads(content)
    except (ValueError, RecursionError) as e:
        raise SourceError(url, f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise SourceError(url, f"expected a JSON array, got {type(data).__name__}")

    releases = []
    for i, item in enumerate(data):
        if isinstance(item, dict):
            releases.append(item)
        else:
            logger.debug(f"Skipping non-object release #{i} in {url}")
    return releases


@dataclass
class AggregationReport:
    """What happened during one aggregation run."""
    sources: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    releases: int = 0

    @property
    def succeeded(self) -> int:
        return len(self.sources) - len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sources': len(self.sources),
            'succeeded': self.succeeded,
            'failed': dict(self.failed),
            'releases': self.releases,
        }


class ManifestAggregator:
    """
    Aggregates release feeds into a ModuleCatalog.

    Example:
        aggregator = ManifestAggregator(HttpClient(), max_workers=4)
        catalog = aggregator.aggregate(manifest_url, runtime_version="1.0")
        for module in catalog:
            print(module.name, len(module.versions))
    """

    def __init__(
        self,
        http_client: Optional[HttpClient] = None,
        max_workers: int = 4
    ):
        """
        Initialize ManifestAggregator.

        Args:
            http_client: Client used for every fetch (creates default if None)
            max_workers: Parallel source fetches (1 = sequential)
        """
        self.http = http_client or HttpClient()
        self.max_workers = max(1, int(max_workers))

    def aggregate(
        self,
        root_manifest_url: str,
        runtime_version: str,
        cancel_event: Optional[threading.Event] = None
    ) -> ModuleCatalog:
        """
        Build a catalog from a root manifest.

        Raises:
            FatalAggregationError: If the root manifest cannot be fetched
        """
        catalog, _ = self.aggregate_with_report(root_manifest_url, runtime_version, cancel_event)
        return catalog

    def aggregate_with_report(
        self,
        root_manifest_url: str,
        runtime_version: str,
        cancel_event: Optional[threading.Event] = None
    ) -> Tuple[ModuleCatalog, AggregationReport]:
        """Like aggregate(), also returning an AggregationReport."""
        try:
            manifest_text = self.http.fetch_text(root_manifest_url)
        except HttpError as e:
            raise FatalAggregationError(
                f"Cannot load root manifest {root_manifest_url}: {e}",
                url=root_manifest_url
            ) from e

        sources = [ReleaseSource.from_url(url) for url in split_manifest(manifest_text)]
        report = AggregationReport(sources=[s.url for s in sources])
        logger.info(f"Root manifest lists {len(sources)} source(s)")

        fetched = self._fetch_all(sources, cancel_event)

        builder = CatalogBuilder()
        for source, (releases, error) in zip(sources, fetched):
            if error is not None:
                logger.warning(f"Skipping source {error}")
                report.failed[source.url] = error.reason
                continue
            for data in releases:
                release = Release.from_api_response(data)
                builder.add(source.module_name, Version.from_release(release, runtime_version))
                report.releases += 1

        catalog = builder.build()
        logger.info(
            f"Catalog built: {len(catalog)} module(s), {report.releases} release(s), "
            f"{len(report.failed)} failed source(s)"
        )
        return catalog, report

    def _fetch_source(
        self,
        source: ReleaseSource,
        cancel_event: Optional[threading.Event]
    ) -> Tuple[List[Dict[str, Any]], Optional[SourceError]]:
        """Fetch and parse one feed; failures are returned, not raised."""
        if cancel_event is not None and cancel_event.is_set():
            return [], SourceError(source.url, "cancelled")
        try:
            content = self.http.fetch_text(source.url)
            return parse_releases(source.url, content.strip()), None
        except SourceError as e:
            return [], e
        except HttpError as e:
            return [], SourceError(source.url, str(e))

    def _fetch_all(
        self,
        sources: List[ReleaseSource],
        cancel_event: Optional[threading.Event]
    ) -> List[Tuple[List[Dict[str, Any]], Optional[SourceError]]]:
        """Fetch every source, returning results in manifest order."""
        if self.max_workers == 1 or len(sources) <= 1:
            results = [self._fetch_source(s, cancel_event) for s in sources]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(lambda s: self._fetch_source(s, cancel_event), sources))

        if cancel_event is not None and cancel_event.is_set():
            raise FatalAggregationError("Aggregation cancelled")
        return results
