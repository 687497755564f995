"""
Tests for VersionResolver — skip rules, source discovery and comparison.
"""

import logging

import pytest

from recipebump.core.config.loader import build_settings
from recipebump.core.errors import ReleaseLookupError, VersionParseError
from recipebump.core.models.recipe import Package, Recipe
from recipebump.core.services.version_resolver import (
    VersionResolver,
    find_source,
    parse_github_url,
)
from tests.helpers import OLD_SHA_A, FakeReleases


def make_recipe(
    name="foo",
    version="1.0.0",
    url="https://github.com/acme/foo/releases/download/v1.0.0/foo.tar.gz",
    homepage="",
) -> Recipe:
    return Recipe(
        name=name,
        version=version,
        homepage=homepage,
        packages=[Package(url=url, sha256=OLD_SHA_A)],
    )


class TestParseGithubUrl:
    """Tests for owner/repo extraction."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://github.com/acme/foo", ("acme", "foo")),
            ("https://github.com/acme/foo/releases/download/v1/x.tgz", ("acme", "foo")),
            ("https://github.com/acme/foo.git", ("acme", "foo")),
            ("https://github.com/my.org/foo.js", ("my.org", "foo.js")),
            ("https://github.com/under_score/re-po", ("under_score", "re-po")),
            ("https://gitlab.com/acme/foo", None),
            ("https://example.com/github.com/acme/foo", None),
            ("https://github.com/acme", None),
        ],
    )
    def test_parse(self, url, expected):
        assert parse_github_url(url) == expected


class TestFindSource:
    """Tests for the source priority order."""

    def test_override_first(self):
        settings = build_settings(release="foo:upstream/foo-cli")
        source = find_source(make_recipe(homepage="https://github.com/acme/foo"), settings)
        assert source.slug == "upstream/foo-cli"
        assert source.origin == "override"

    def test_package_url_before_homepage(self):
        recipe = make_recipe(homepage="https://github.com/other/home")
        source = find_source(recipe, build_settings())
        assert source.slug == "acme/foo"
        assert source.origin == "package-url"

    def test_homepage_fallback(self):
        recipe = make_recipe(
            url="https://dl.example.com/foo-1.0.0.tgz", homepage="https://github.com/acme/foo"
        )
        source = find_source(recipe, build_settings())
        assert source.slug == "acme/foo"
        assert source.origin == "homepage"

    def test_no_source(self):
        recipe = make_recipe(url="https://dl.example.com/foo-1.0.0.tgz", homepage="https://foo.dev")
        assert find_source(recipe, build_settings()) is None


class TestResolve:
    """Tests for VersionResolver.resolve."""

    def test_newer_release(self):
        releases = FakeReleases({"acme/foo": "v1.2.0"})
        resolution = VersionResolver(releases, build_settings()).resolve(make_recipe())
        assert resolution.needs_update
        plan = resolution.plan
        assert plan.recipe_name == "foo"
        assert plan.old_version == "1.0.0"
        assert plan.new_version == "1.2.0"
        assert plan.source.slug == "acme/foo"
        assert not plan.is_hashed
        assert releases.calls == ["acme/foo"]

    @pytest.mark.parametrize("tag", ["1.0.0", "v1.0.0", "0.9.9", "1.0.0+build.7", "1.0.0-rc.1"])
    def test_not_newer(self, tag):
        releases = FakeReleases({"acme/foo": tag})
        resolution = VersionResolver(releases, build_settings()).resolve(make_recipe())
        assert not resolution.needs_update
        assert not resolution.skipped

    def test_prerelease_newer_than_current(self):
        releases = FakeReleases({"acme/foo": "1.1.0-beta.1"})
        resolution = VersionResolver(releases, build_settings()).resolve(make_recipe())
        assert resolution.plan.new_version == "1.1.0-beta.1"

    def test_pinned_no_network(self, caplog):
        releases = FakeReleases({"acme/foo": "9.9.9"})
        with caplog.at_level(logging.WARNING):
            resolution = VersionResolver(releases, build_settings()).resolve(
                make_recipe(name="foo@1.0.0")
            )
        assert resolution.skipped
        assert not resolution.needs_update
        assert releases.calls == []
        assert "skipping pinned version" in caplog.text

    def test_skip_set_no_network(self):
        releases = FakeReleases({"acme/foo": "9.9.9"})
        resolution = VersionResolver(releases, build_settings(skip="foo")).resolve(make_recipe())
        assert resolution.skipped
        assert releases.calls == []

    def test_skip_beats_override(self):
        releases = FakeReleases({"up/foo": "9.9.9"})
        settings = build_settings(skip="foo", release="foo:up/foo")
        assert VersionResolver(releases, settings).resolve(make_recipe()).skipped
        assert releases.calls == []

    def test_no_source_is_not_a_failure(self, caplog):
        releases = FakeReleases()
        recipe = make_recipe(url="https://dl.example.com/foo-1.0.0.tgz")
        with caplog.at_level(logging.WARNING):
            resolution = VersionResolver(releases, build_settings()).resolve(recipe)
        assert not resolution.needs_update
        assert releases.calls == []
        assert "no available github release" in caplog.text

    def test_override_is_queried(self):
        releases = FakeReleases({"upstream/foo-cli": "2.0.0"})
        settings = build_settings(release="foo:upstream/foo-cli")
        resolution = VersionResolver(releases, settings).resolve(make_recipe())
        assert resolution.plan.new_version == "2.0.0"
        assert releases.calls == ["upstream/foo-cli"]

    def test_non_semver_tag_is_soft_skip(self, caplog):
        releases = FakeReleases({"acme/foo": "latest"})
        with caplog.at_level(logging.WARNING):
            resolution = VersionResolver(releases, build_settings()).resolve(make_recipe())
        assert not resolution.needs_update
        assert "cannot parse semver for: latest" in caplog.text

    def test_bad_current_version_propagates(self):
        releases = FakeReleases({"acme/foo": "1.2.0"})
        with pytest.raises(VersionParseError):
            VersionResolver(releases, build_settings()).resolve(make_recipe(version="one"))

    def test_lookup_failure_propagates(self):
        releases = FakeReleases({"acme/foo": ReleaseLookupError("boom")})
        with pytest.raises(ReleaseLookupError, match="boom"):
            VersionResolver(releases, build_settings()).resolve(make_recipe())
