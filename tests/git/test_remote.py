"""
Tests for listing the tags of a git remote.

The local repository tests build a throwaway repository with dulwich and
list it over a file URL; the integration test reaches GitHub.
"""

import pytest

from dulwich import porcelain

from tfmodref.git.remote import list_remote_tags
from tfmodref.versioning.exceptions import TransportError

AUTHOR = b"Test Author <test@example.com>"


@pytest.fixture
def tagged_repo(tmp_path):
    """A local repository with a branch and three tags."""
    repo_path = tmp_path / "modules"
    repo_path.mkdir()
    repo = porcelain.init(str(repo_path))

    main_tf = repo_path / "main.tf"
    main_tf.write_text('variable "name" {}\n')
    porcelain.add(repo, [str(main_tf)])
    porcelain.commit(repo, message=b"initial", author=AUTHOR, committer=AUTHOR)

    for tag in (b"v1.0.0", b"v1.1.0", b"v2.0.0"):
        porcelain.tag_create(repo, tag)
    repo.close()

    return repo_path


@pytest.mark.short
def test_list_local_repository_tags(tagged_repo):
    tags = list_remote_tags(f"file://{tagged_repo}")
    assert sorted(tags) == ["v1.0.0", "v1.1.0", "v2.0.0"]


@pytest.mark.short
def test_list_missing_repository(tmp_path):
    with pytest.raises(TransportError) as excinfo:
        list_remote_tags(f"file://{tmp_path / 'missing'}")
    assert excinfo.value.url == f"file://{tmp_path / 'missing'}"


@pytest.mark.integration
def test_list_github_repository_tags():
    tags = list_remote_tags("https://github.com/terraform-aws-modules/terraform-aws-vpc.git")
    assert "v5.0.0" in tags
    assert not any(tag.endswith("^{}") for tag in tags)
