"""
Release, Version and Module domain objects for modulehub.

Release mirrors one entry of a GitHub releases feed. Version is the
immutable, catalog-side view of a Release once its compatibility has
been decided. Module groups the versions of one logical module.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple

from ..compat import display_tag, is_compatible
from ..naming import resolve_name

DEFAULT_TAG = "unknown"
DEFAULT_BODY = "No description available."
DEFAULT_HTML_URL = "No URL available."


@dataclass(frozen=True)
class ReleaseSource:
    """A feed URL contributing releases for exactly one module."""
    url: str
    module_name: str

    @classmethod
    def from_url(cls, url: str) -> 'ReleaseSource':
        """Create a source, resolving its module name once."""
        url = url.strip()
        return cls(url=url, module_name=resolve_name(url))


@dataclass(frozen=True)
class Release:
    """One published release from a source feed."""
    tag: str = DEFAULT_TAG
    body: str = DEFAULT_BODY
    zip_url: str = ""
    html_url: str = DEFAULT_HTML_URL

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'Release':
        """Create from a GitHub release API object, defaulting missing fields."""
        def text(key: str, default: str) -> str:
            value = data.get(key)
            return default if value is None else str(value)

        return cls(
            tag=text('tag_name', DEFAULT_TAG),
            body=text('body', DEFAULT_BODY),
            zip_url=text('zipball_url', ''),
            html_url=text('html_url', DEFAULT_HTML_URL),
        )


@dataclass(frozen=True)
class Version:
    """
    A release as it appears in the catalog.

    The compatibility flag is decided once, at ingestion, against the
    runtime version known then. It is never recomputed.
    """
    tag: str
    compatible: bool
    download_url: str = ""
    description: str = ""

    @classmethod
    def from_release(cls, release: Release, runtime_version: str) -> 'Version':
        """Ingest a release, classifying it against runtime_version."""
        return cls(
            tag=release.tag,
            compatible=is_compatible(release.body, runtime_version),
            download_url=release.zip_url,
            description=f"{release.body}\n\nGitHub URL: {release.html_url}",
        )

    @property
    def display_tag(self) -> str:
        """Tag with the incompatibility marker appended when needed."""
        return display_tag(self.tag, self.compatible)

    @property
    def downloadable(self) -> bool:
        return bool(self.download_url)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tag': self.tag,
            'display_tag': self.display_tag,
            'compatible': self.compatible,
            'download_url': self.download_url,
            'description': self.description,
        }


@dataclass(frozen=True)
class Module:
    """
    A logical module with every version discovered for it.

    Versions are kept in discovery order, not version order.
    latest_tag is the display tag of the first version seen and is only
    informational; use ModuleCatalog.select_best() to pick a version.
    """
    name: str
    versions: Tuple[Version, ...] = field(default_factory=tuple)
    latest_tag: Optional[str] = None

    def find_version(self, tag: str) -> Optional[int]:
        """Index of the first version whose tag or display tag equals tag."""
        for index, version in enumerate(self.versions):
            if tag in (version.tag, version.display_tag):
                return index
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'latest_tag': self.latest_tag,
            'version_count': len(self.versions),
            'versions': [v.to_dict() for v in self.versions],
        }
