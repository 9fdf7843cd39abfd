import pytest

from tfmodref.git.cache import TagResolver


@pytest.fixture
def patched_resolver(monkeypatch, fake_transport):
    """Route the commands' tag lookups through the fake transport."""

    def _resolver(cache):
        return TagResolver(cache, transport=fake_transport)

    monkeypatch.setattr("tfmodref.cli.list.TagResolver", _resolver)
    monkeypatch.setattr("tfmodref.cli.update.TagResolver", _resolver)
    return fake_transport
