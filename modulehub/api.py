"""
High-level Python API for modulehub.

Owns the current ModuleCatalog and exposes the queries and actions a
front end needs.

Example:
    import modulehub

    # Create instance (uses config defaults)
    hub = modulehub.ModuleHub()

    # Or with explicit configuration
    hub = modulehub.ModuleHub(
        manifest_url="https://example.com/manifest.txt",
        runtime_version="1.0",
    )

    # Build the catalog
    hub.refresh()

    # Browse modules and their versions
    for module in hub.modules():
        best = hub.best_version_index(module.name)
        print(module.name, module.versions[best].display_tag)

    # Install the best version (or a specific one)
    result = hub.install("Echelon (Chat)")
    print(result.files_written)

    # Install without blocking the caller
    future = hub.install_async("Echelon (Chat)", version="v1.2.0")
"""

from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging
import threading

from rapidfuzz import fuzz

from .config import (
    load_config,
    get_manifest_url,
    get_runtime_version,
    get_install_directory,
)
from .domain import Module, ModuleCatalog, SelectionResult, Version, select_best
from .exit_codes import MaterializationError, ModuleNotFoundInCatalog
from .infra import HttpClient
from .services import AggregationReport, ArchiveMaterializer, ManifestAggregator, MaterializationResult

logger = logging.getLogger(__name__)

SUGGESTION_THRESHOLD = 60


def _pick_version(module: Module, version: Optional[str]) -> Version:
    """The named version of a module, or its best one."""
    if version is None:
        index = select_best(module.versions).index
    else:
        index = module.find_version(version)
    if index is None:
        wanted = version or "any version"
        raise ModuleNotFoundInCatalog(f"{module.name} has no {wanted}")
    return module.versions[index]


def suggest_names(name: str, candidates: List[str], limit: int = 3) -> List[str]:
    """Closest module names to a mistyped one, best first."""
    scored = [(fuzz.WRatio(name.lower(), c.lower()), c) for c in candidates]
    scored = [item for item in scored if item[0] >= SUGGESTION_THRESHOLD]
    scored.sort(key=lambda item: -item[0])
    return [c for _, c in scored[:limit]]


class ModuleHub:
    """
    High-level API for modulehub.

    The catalog is replaced wholesale by refresh(); readers holding the
    previous catalog keep a complete, consistent view. A failed refresh
    leaves the current catalog untouched.
    """

    def __init__(
        self,
        manifest_url: Optional[str] = None,
        runtime_version: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        http_client: Optional[HttpClient] = None
    ):
        """
        Initialize ModuleHub.

        Args:
            manifest_url: Root manifest URL (overrides config)
            runtime_version: Runtime version releases must declare (overrides config)
            config: Full config dict (loads from file if None)
            http_client: Shared HTTP client (creates one from config if None)
        """
        self._config = config if config is not None else load_config()

        self.manifest_url = manifest_url or get_manifest_url(self._config)
        self.runtime_version = runtime_version or get_runtime_version(self._config)

        http_config = self._config.get('http', {})
        self._http = http_client or HttpClient(
            timeout=http_config.get('timeout_seconds', 30),
            token=self._config.get('github', {}).get('token') or None,
            user_agent=http_config.get('user_agent', 'modulehub'),
        )

        self._aggregator = ManifestAggregator(
            http_client=self._http,
            max_workers=self._config.get('aggregation', {}).get('max_workers', 4)
        )
        self._materializer = ArchiveMaterializer(http_client=self._http)

        self._lock = threading.Lock()
        self._catalog = ModuleCatalog()
        self._last_report: Optional[AggregationReport] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def config(self) -> Dict[str, Any]:
        """Access the configuration."""
        return self._config

    @property
    def catalog(self) -> ModuleCatalog:
        """The current catalog snapshot."""
        with self._lock:
            return self._catalog

    @property
    def last_report(self) -> Optional[AggregationReport]:
        return self._last_report

    # =========================================================================
    # CATALOG
    # =========================================================================

    def refresh(self, cancel_event: Optional[threading.Event] = None) -> ModuleCatalog:
        """
        Rebuild the catalog from the root manifest.

        Raises:
            FatalAggregationError: If the root manifest cannot be fetched;
                the previous catalog stays in place
        """
        catalog, report = self._aggregator.aggregate_with_report(
            self.manifest_url,
            self.runtime_version,
            cancel_event
        )
        with self._lock:
            self._catalog = catalog
            self._last_report = report
        return catalog

    def modules(self) -> List[Module]:
        return list(self.catalog)

    def get_module(self, name: str) -> Module:
        """
        Look up a module by name.

        Raises:
            ModuleNotFoundInCatalog: If no module has that name
        """
        catalog = self.catalog
        module = catalog.get(name)
        if module is not None:
            return module

        # Module names contain spaces and parentheses; accept any casing
        folded = [m for m in catalog if m.name.casefold() == name.casefold()]
        if len(folded) == 1:
            return folded[0]

        message = f"Unknown module: {name}"
        suggestions = suggest_names(name, catalog.names())
        if suggestions:
            message += f" (did you mean: {', '.join(suggestions)}?)"
        raise ModuleNotFoundInCatalog(message)

    def best_version(self, name: str) -> SelectionResult:
        return select_best(self.get_module(name).versions)

    def best_version_index(self, name: str) -> Optional[int]:
        return self.best_version(name).index

    def resolve_version(self, name: str, version: Optional[str] = None) -> Version:
        """
        Pick a version of a module: the named tag, or the best one.

        Raises:
            ModuleNotFoundInCatalog: If the module or tag is unknown, or
                the module has no versions
        """
        return _pick_version(self.get_module(name), version)

    def describe(self, name: str, version: Optional[str] = None) -> str:
        """Display description of a version (default: the best one)."""
        return self.resolve_version(name, version).description

    # =========================================================================
    # INSTALL
    # =========================================================================

    def target_directory(self, name: str, base_dir: Optional[Union[str, Path]] = None) -> Path:
        """Directory a module is installed into."""
        if name in (".", "..") or Path(name).name != name:
            raise MaterializationError(f"Module name cannot be used as a directory: {name!r}")
        base = Path(base_dir).expanduser() if base_dir else get_install_directory(self._config)
        return base / name

    def install(
        self,
        name: str,
        version: Optional[str] = None,
        base_dir: Optional[Union[str, Path]] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> MaterializationResult:
        """
        Download and extract a module version.

        Reads the module name and download URL from the catalog at call
        time; the catalog itself is not modified.

        Raises:
            ModuleNotFoundInCatalog: If the module or version is unknown
            MaterializationError: If download or extraction fails
        """
        module = self.get_module(name)
        selected = _pick_version(module, version)
        target = self.target_directory(module.name, base_dir)
        logger.info(f"Installing {module.name} {selected.display_tag} into {target}")
        return self._materializer.materialize(selected.download_url, target, module.name, cancel_event)

    def install_async(
        self,
        name: str,
        version: Optional[str] = None,
        base_dir: Optional[Union[str, Path]] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> 'Future[MaterializationResult]':
        """Run install() on a background worker and return its Future."""
        module = self.get_module(name)
        selected = _pick_version(module, version)
        target = self.target_directory(module.name, base_dir)
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="modulehub-install")
            executor = self._executor
        return executor.submit(
            self._materializer.materialize,
            selected.download_url,
            target,
            module.name,
            cancel_event
        )

    def close(self) -> None:
        """Wait for background installs and release the HTTP session."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        self._http.close()


def create(
    manifest_url: Optional[str] = None,
    runtime_version: Optional[str] = None,
    **kwargs
) -> ModuleHub:
    """
    Create a ModuleHub instance.

    Convenience function for:
        hub = modulehub.create(runtime_version="1.0")
    """
    return ModuleHub(manifest_url=manifest_url, runtime_version=runtime_version, **kwargs)
