"""Tests for the domain layer."""

import pytest

from modulehub.domain import (
    CatalogBuilder,
    Module,
    ModuleCatalog,
    Release,
    ReleaseSource,
    SelectionResult,
    Version,
    select_best,
    select_best_display_index,
    select_best_index,
)
from modulehub.domain.module import DEFAULT_BODY, DEFAULT_HTML_URL, DEFAULT_TAG


def make_version(tag, compatible=True, url="https://example.com/a.zip"):
    return Version(tag=tag, compatible=compatible, download_url=url, description=f"notes for {tag}")


class TestRelease:
    """Tests for Release ingestion from feed objects."""

    def test_from_api_response(self):
        """Test a complete release object."""
        release = Release.from_api_response({
            'tag_name': 'v1.2.0',
            'body': 'Changes\n#AbstractModule-1.0',
            'zipball_url': 'https://api.github.com/repos/o/r/zipball/v1.2.0',
            'html_url': 'https://github.com/o/r/releases/tag/v1.2.0',
        })
        assert release.tag == 'v1.2.0'
        assert release.zip_url.endswith('zipball/v1.2.0')
        assert release.html_url == 'https://github.com/o/r/releases/tag/v1.2.0'

    def test_missing_fields_default(self):
        release = Release.from_api_response({})
        assert release.tag == DEFAULT_TAG == "unknown"
        assert release.body == DEFAULT_BODY == "No description available."
        assert release.html_url == DEFAULT_HTML_URL == "No URL available."
        assert release.zip_url == ""

    def test_null_fields_default(self):
        release = Release.from_api_response({'tag_name': None, 'body': None, 'zipball_url': None})
        assert release.tag == "unknown"
        assert release.body == "No description available."
        assert release.zip_url == ""

    def test_release_source_resolves_name(self):
        source = ReleaseSource.from_url("  https://api.github.com/repos/me/Echelon-Chat/releases\n")
        assert source.url == "https://api.github.com/repos/me/Echelon-Chat/releases"
        assert source.module_name == "Echelon (Chat)"


class TestVersion:
    """Tests for Version."""

    def test_from_release_compatible(self):
        release = Release(tag='v1.0', body='#AbstractModule-1.0', zip_url='https://x/z', html_url='https://x/h')
        version = Version.from_release(release, '1.0')
        assert version.compatible
        assert version.display_tag == 'v1.0'
        assert version.download_url == 'https://x/z'

    def test_from_release_incompatible(self):
        release = Release(tag='v1.0', body='#AbstractModule-2.0', zip_url='', html_url='https://x/h')
        version = Version.from_release(release, '1.0')
        assert not version.compatible
        assert version.display_tag == 'v1.0 (incompatible)'
        assert not version.downloadable

    def test_description_includes_url(self):
        release = Release(tag='v1.0', body='Body text', html_url='https://x/h')
        version = Version.from_release(release, '1.0')
        assert version.description == "Body text\n\nGitHub URL: https://x/h"

    def test_default_body_is_incompatible(self):
        """A release without a body cannot carry the marker."""
        version = Version.from_release(Release.from_api_response({'tag_name': 'v1'}), '1.0')
        assert not version.compatible
        assert version.description == "No description available.\n\nGitHub URL: No URL available."

    def test_to_dict(self):
        data = make_version('v1.0', compatible=False).to_dict()
        assert data['tag'] == 'v1.0'
        assert data['display_tag'] == 'v1.0 (incompatible)'
        assert data['compatible'] is False

    def test_frozen(self):
        version = make_version('v1.0')
        with pytest.raises(Exception):
            version.tag = 'v2.0'


class TestModule:

    def test_find_version_by_tag_or_display_tag(self):
        module = Module(name='Chat', versions=(make_version('v2.0', False), make_version('v1.0')))
        assert module.find_version('v2.0') == 0
        assert module.find_version('v2.0 (incompatible)') == 0
        assert module.find_version('v1.0') == 1
        assert module.find_version('v3.0') is None

    def test_to_dict(self):
        module = Module(name='Chat', versions=(make_version('v1.0'),), latest_tag='v1.0')
        data = module.to_dict()
        assert data['name'] == 'Chat'
        assert data['version_count'] == 1
        assert data['versions'][0]['tag'] == 'v1.0'


class TestSelectBest:
    """Tests for best-version selection."""

    def test_highest_compatible_wins(self):
        versions = [make_version('2.0', False), make_version('1.0'), make_version('1.5')]
        assert select_best_index(versions) == 2

    def test_display_strings(self):
        assert select_best_display_index(["2.0 (incompatible)", "1.0", "1.5"]) == 2

    def test_all_incompatible_falls_back_to_first(self):
        versions = [make_version('2.0', False), make_version('3.0', False)]
        result = select_best(versions)
        assert result == SelectionResult(index=0, compatible_found=False)
        assert result.is_fallback

    def test_all_incompatible_display_strings(self):
        assert select_best_display_index(["2.0 (incompatible)", "3.0 (incompatible)"]) == 0

    def test_empty(self):
        result = select_best([])
        assert result.index is None
        assert not result.is_fallback
        assert select_best_display_index([]) is None

    def test_ties_keep_earliest(self):
        versions = [make_version('1.0'), make_version('v1.0.0'), make_version('1')]
        assert select_best_index(versions) == 0

    def test_discovery_order_does_not_matter(self):
        versions = [make_version('1.2'), make_version('1.10'), make_version('1.9')]
        assert select_best_index(versions) == 1

    def test_result_is_compatible_when_any_is(self):
        versions = [make_version('9.0', False), make_version('0.1'), make_version('8.0', False)]
        result = select_best(versions)
        assert result.index == 1
        assert result.compatible_found
        assert versions[result.index].compatible


class TestCatalog:
    """Tests for ModuleCatalog and CatalogBuilder."""

    def build(self):
        builder = CatalogBuilder()
        builder.add('Chat', make_version('v1.0', False))
        builder.add('Scanner', make_version('v0.1'))
        builder.add('Chat', make_version('v0.9'))
        return builder.build()

    def test_module_order_is_first_discovery(self):
        assert self.build().names() == ['Chat', 'Scanner']

    def test_versions_appended_in_order(self):
        catalog = self.build()
        assert [v.tag for v in catalog.versions('Chat')] == ['v1.0', 'v0.9']

    def test_latest_is_first_display_tag(self):
        assert self.build().get('Chat').latest_tag == 'v1.0 (incompatible)'

    def test_select_best(self):
        catalog = self.build()
        assert catalog.select_best('Chat') == 1
        assert catalog.select_best('Missing') is None

    def test_description(self):
        catalog = self.build()
        assert catalog.description('Chat', 1) == 'notes for v0.9'
        assert catalog.description('Chat', 5) is None
        assert catalog.description('Chat', -1) is None
        assert catalog.description('Missing', 0) is None

    def test_every_module_has_a_version(self):
        for module in self.build():
            assert len(module.versions) >= 1

    def test_empty_catalog(self):
        catalog = ModuleCatalog()
        assert not catalog
        assert len(catalog) == 0
        assert catalog.get('Chat') is None
        assert catalog.versions('Chat') == ()
        assert catalog.to_dict() == {'modules': []}

    def test_builder_does_not_share_state_with_catalog(self):
        builder = CatalogBuilder()
        builder.add('Chat', make_version('v1.0'))
        catalog = builder.build()
        builder.add('Chat', make_version('v2.0'))
        assert len(catalog.versions('Chat')) == 1
