"""
Tests for decomposing and re-encoding module source strings.

All tests in this file are marked as 'short' since they don't require
external dependencies or network I/O.
"""

import pytest

from tfmodref.source.reference import (
    NotAGitSource,
    SourceReference,
    decompose,
    encode,
    split_getters,
)


@pytest.mark.short
class TestSplitGetters:
    def test_no_getter(self):
        assert split_getters("https://github.com/org/repo.git") == (
            [],
            "https://github.com/org/repo.git",
        )

    def test_single_getter(self):
        getters, rest = split_getters("git::https://github.com/org/repo.git")
        assert getters == ["git"]
        assert rest == "https://github.com/org/repo.git"

    def test_nested_getters_innermost_first(self):
        getters, rest = split_getters("git::ssh::git@example.com:org/repo.git")
        assert getters == ["ssh", "git"]
        assert rest == "git@example.com:org/repo.git"

    def test_scheme_separator_is_not_a_getter(self):
        getters, rest = split_getters("ssh://git@example.com/org/repo.git")
        assert getters == []
        assert rest == "ssh://git@example.com/org/repo.git"


@pytest.mark.short
class TestDecompose:
    """Test splitting source strings into their parts."""

    def test_https_with_forced_getter(self):
        reference = decompose(
            "git::https://github.com/acme/terraform-vpc.git?ref=v1.2.0"
        )
        assert reference.getters == ["git"]
        assert reference.remote_url == "https://github.com/acme/terraform-vpc.git"
        assert reference.canonical_url == reference.remote_url
        assert reference.subdir is None
        assert reference.ref == "v1.2.0"
        assert reference.query == []

    def test_scp_like_with_subdir(self):
        reference = decompose("git@github.com:acme/modules.git//network/vpc?ref=1.0")
        assert reference.getters == []
        assert reference.remote_url == "git@github.com:acme/modules.git"
        assert reference.subdir == "network/vpc"
        assert reference.ref == "1.0"

    def test_extra_query_keeps_its_position(self):
        reference = decompose(
            "git::ssh://git@example.com/network/modules.git//vpc?depth=1&ref=v1.2.0"
        )
        assert reference.remote_url == "ssh://git@example.com/network/modules.git"
        assert reference.subdir == "vpc"
        assert reference.query == ["depth=1"]
        assert reference.ref_index == 1

    def test_unpinned_source(self):
        reference = decompose("https://github.com/acme/terraform-vpc.git")
        assert reference.ref is None
        assert reference.query is None

    def test_only_first_ref_is_kept(self):
        reference = decompose(
            "https://github.com/acme/terraform-vpc.git?ref=v1.0.0&ref=v2.0.0"
        )
        assert reference.ref == "v1.0.0"
        assert reference.query == []

    def test_subdir_does_not_change_canonical_url(self):
        first = decompose("git::https://github.com/acme/modules.git//vpc?ref=v1.0.0")
        second = decompose("https://github.com/acme/modules.git//dns")
        assert first.canonical_url == second.canonical_url

    @pytest.mark.parametrize(
        "source",
        [
            "ssh://git@example.com/org/repo.git",
            "ssh://git@example.com:2222/org/repo",
            "git://example.com/org/repo",
            "git+ssh://git@example.com/org/repo",
            "https://example.com/org/repo.git",
            "https://github.com/org/repo",
            "https://gitlab.com/group/sub/repo",
            "https://bitbucket.org/org/repo",
            "git::https://example.com/org/repo",
            "git::file:///srv/git/modules",
        ],
    )
    def test_git_sources_are_accepted(self, source):
        assert decompose(source).remote_url

    @pytest.mark.parametrize(
        "source",
        [
            "./modules/vpc",
            "../vpc",
            "hashicorp/consul/aws",
            "app.terraform.io/acme/vpc/aws",
            "github.com/acme/terraform-vpc",
            "https://example.com/modules/vpc.zip",
            "s3::https://s3-eu-west-1.amazonaws.com/bucket/vpc.zip",
            "hg::https://example.com/org/repo",
            "gcs::https://www.googleapis.com/storage/v1/bucket/vpc",
            "file:///srv/git/modules",
            "ftp://example.com/org/repo.git",
            "https://github.com",
            "",
        ],
    )
    def test_other_sources_are_rejected(self, source):
        with pytest.raises(NotAGitSource):
            decompose(source)

    def test_rejection_names_the_reason(self):
        with pytest.raises(NotAGitSource, match="forced getter 's3'") as excinfo:
            decompose("s3::https://bucket.s3.amazonaws.com/vpc.zip")
        assert excinfo.value.source == "s3::https://bucket.s3.amazonaws.com/vpc.zip"


@pytest.mark.short
class TestEncode:
    """Test that references encode back into source strings."""

    @pytest.mark.parametrize(
        "source",
        [
            "https://github.com/acme/terraform-vpc.git",
            "https://github.com/acme/terraform-vpc.git?ref=v3.0.0",
            "git::https://github.com/acme/terraform-vpc.git?ref=v3.0.0",
            "git@github.com:acme/modules.git//vpc?ref=1.0",
            "git::ssh::git@example.com:network/modules.git?ref=v2.1.0",
            "git::ssh://git@example.com/network/modules.git//vpc?depth=1&ref=v1.2.0",
            "git::ssh://git@example.com/network/modules.git//vpc?ref=v1.2.0&depth=1",
            "https://github.com/acme/terraform-vpc.git?",
            "https://github.com/acme/terraform-vpc.git?depth=1",
            "GIT::HTTPS://GitHub.com/Acme/terraform-vpc.git?ref=v3.0.0",
        ],
    )
    def test_unmodified_reference_round_trips(self, source):
        assert encode(decompose(source)) == source

    def test_with_ref_replaces_the_pin_in_place(self):
        reference = decompose(
            "git::ssh://git@example.com/network/modules.git//vpc?ref=v1.2.0&depth=1"
        )
        assert reference.with_ref("v2.0.0").encode() == (
            "git::ssh://git@example.com/network/modules.git//vpc?ref=v2.0.0&depth=1"
        )

    def test_with_ref_leaves_the_original_untouched(self):
        reference = decompose("https://github.com/acme/vpc.git?ref=v1.0.0")
        reference.with_ref("v2.0.0")
        assert reference.ref == "v1.0.0"

    def test_pinning_an_unpinned_source_appends_ref(self):
        reference = decompose("git@github.com:acme/modules.git//vpc")
        assert reference.with_ref("v1.0.0").encode() == (
            "git@github.com:acme/modules.git//vpc?ref=v1.0.0"
        )

    def test_pinning_appends_after_existing_query(self):
        reference = decompose("https://github.com/acme/vpc.git?depth=1")
        assert reference.with_ref("v1.0.0").encode() == (
            "https://github.com/acme/vpc.git?depth=1&ref=v1.0.0"
        )

    def test_encode_from_parts(self):
        reference = SourceReference(
            remote_url="https://github.com/acme/vpc.git",
            getters=["git"],
            subdir="modules/vpc",
            ref="v1.0.0",
        )
        assert encode(reference) == (
            "git::https://github.com/acme/vpc.git//modules/vpc?ref=v1.0.0"
        )
