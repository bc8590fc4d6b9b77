"""
Module catalog and best-version selection.

ModuleCatalog is the immutable result of one aggregation run. It is
built through CatalogBuilder and replaced wholesale on refresh, so
readers never observe a half-built catalog.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Iterator, List, Optional, Sequence, Tuple

from ..compat import strip_incompatible_suffix
from ..versioning import compare_versions, GREATER
from .module import Module, Version


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of best-version selection for one module."""
    index: Optional[int]
    compatible_found: bool

    @property
    def is_fallback(self) -> bool:
        """True when no compatible version exists and the default is shown."""
        return self.index is not None and not self.compatible_found


def _select(candidates: Sequence[Tuple[str, bool]]) -> SelectionResult:
    """Pick the highest compatible tag; ties keep the earliest."""
    best_index: Optional[int] = None
    best_tag = ""

    for i, (tag, compatible) in enumerate(candidates):
        if not compatible:
            continue
        if best_index is None or compare_versions(tag, best_tag) == GREATER:
            best_index = i
            best_tag = tag

    if best_index is not None:
        return SelectionResult(index=best_index, compatible_found=True)
    if candidates:
        return SelectionResult(index=0, compatible_found=False)
    return SelectionResult(index=None, compatible_found=False)


def select_best(versions: Sequence[Version]) -> SelectionResult:
    """Select the best version of a module (advisory default focus)."""
    return _select([(v.tag, v.compatible) for v in versions])


def select_best_index(versions: Sequence[Version]) -> Optional[int]:
    """
    Index of the highest compatible version.

    Falls back to index 0 when no version is compatible, and to None
    when there are no versions at all.
    """
    return select_best(versions).index


def select_best_display_index(display_tags: Sequence[str]) -> Optional[int]:
    """Same selection over display strings such as "2.0 (incompatible)"."""
    return _select([strip_incompatible_suffix(d) for d in display_tags]).index


@dataclass(frozen=True)
class ModuleCatalog:
    """
    Immutable, ordered collection of modules.

    Module order is first-discovery order across sources, then releases.
    """
    modules: Tuple[Module, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.modules)

    def __iter__(self) -> Iterator[Module]:
        return iter(self.modules)

    def __bool__(self) -> bool:
        return bool(self.modules)

    def names(self) -> List[str]:
        return [m.name for m in self.modules]

    def get(self, name: str) -> Optional[Module]:
        """Look up a module by exact name."""
        for module in self.modules:
            if module.name == name:
                return module
        return None

    def versions(self, name: str) -> Tuple[Version, ...]:
        """Versions of a module in discovery order (empty if unknown)."""
        module = self.get(name)
        return module.versions if module else ()

    def select_best(self, name: str) -> Optional[int]:
        """Advisory best-version index for a module."""
        return select_best_index(self.versions(name))

    def description(self, name: str, index: int) -> Optional[str]:
        """Display description of a version, or None if out of range."""
        versions = self.versions(name)
        if 0 <= index < len(versions):
            return versions[index].description
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {'modules': [m.to_dict() for m in self.modules]}


class CatalogBuilder:
    """
    Mutable accumulator used during a single aggregation run.

    Not thread-safe: only the aggregating thread may call add().
    """

    def __init__(self):
        self._order: List[str] = []
        self._versions: Dict[str, List[Version]] = {}
        self._latest: Dict[str, str] = {}

    def add(self, module_name: str, version: Version) -> None:
        """Append a version to its module, creating the module on first sight."""
        if module_name not in self._versions:
            self._order.append(module_name)
            self._versions[module_name] = []
            self._latest[module_name] = version.display_tag
        self._versions[module_name].append(version)

    def build(self) -> ModuleCatalog:
        return ModuleCatalog(modules=tuple(
            Module(
                name=name,
                versions=tuple(self._versions[name]),
                latest_tag=self._latest[name],
            )
            for name in self._order
        ))
