import io

import pytest
import logging

from pathlib import Path
from typing import Dict, List

from tfmodref.cli.utils.logging import HANDLER_NAME
from tfmodref.git.cache import RemoteTagSet
from tfmodref.source.model import ModuleSource
from tfmodref.source.reference import decompose


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("tfmodref")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


class FakeTransport:
    """Stands in for the remote tag listing, recording every call."""

    def __init__(self, tags: Dict[str, List[str]]):
        self.tags = tags
        self.calls: List[str] = []

    def __call__(self, url: str) -> List[str]:
        self.calls.append(url)
        return list(self.tags[url])


@pytest.fixture
def release_tags() -> List[str]:
    return ["v1.0.0", "v2.0.0", "v3.0.0", "v4.0.0", "v5.0.0"]


@pytest.fixture
def fake_transport(release_tags):
    """Transport knowing two repositories with the same release history."""
    return FakeTransport(
        {
            "https://github.com/acme/terraform-vpc.git": release_tags,
            "git@github.com:acme/terraform-dns.git": release_tags,
        }
    )


@pytest.fixture
def make_module(release_tags):
    """Build a ModuleSource from a source string, with resolved remote tags."""

    def _make(source: str, tags: List[str] = None, resolved: bool = True):
        reference = decompose(source)
        module = ModuleSource("main.tf [test]", reference)
        if resolved:
            module.remote_tags = RemoteTagSet.from_tags(
                reference.canonical_url, release_tags if tags is None else tags
            )
        return module

    return _make


@pytest.fixture
def tf_dir(tmp_path) -> Path:
    """A small Terraform/Terragrunt tree."""
    (tmp_path / "network").mkdir()
    (tmp_path / "network" / "main.tf").write_text(
        """# network stack
module "vpc" {
  source = "git::https://github.com/acme/terraform-vpc.git?ref=v3.0.0"
  cidr   = "10.0.0.0/16"
}

module "dns" {
  source = "git@github.com:acme/terraform-dns.git//zones"
}

module "registry" {
  source  = "terraform-aws-modules/vpc/aws"
  version = "5.0.0"
}
"""
    )
    (tmp_path / "live").mkdir()
    (tmp_path / "live" / "terragrunt.hcl").write_text(
        """terraform {
  source = "git::git@github.com:acme/terraform-dns.git?ref=v5.0.0"
}

inputs = {
  zone = "example.com"
}
"""
    )
    (tmp_path / "README.md").write_text("not terraform\n")
    return tmp_path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's own configuration file out of every test."""
    config_file = tmp_path_factory.mktemp("config") / "tfmodref.cfg"
    monkeypatch.setenv("TFMODREF_CONFIG", str(config_file))
    return config_file


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop the stdout handler a CLI invocation leaves behind."""
    yield
    logger = logging.getLogger("tfmodref")
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)
