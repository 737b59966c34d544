from __future__ import annotations

import pytest

from synpull.domain.pulling import PullClientRegistry
from tests.helpers.posts import FakePullClient


def test_register_and_lookup_normalizes_type() -> None:
    client = FakePullClient()
    registry = PullClientRegistry()

    registry.register("RSS", client)

    assert registry.get("rss") is client
    assert registry.get(" Rss ") is client
    assert "rss" in registry
    assert len(registry) == 1
    assert registry.transport_types() == ("rss",)


def test_unknown_or_blank_type_resolves_to_none() -> None:
    registry = PullClientRegistry({"rss": FakePullClient()})

    assert registry.get("atom") is None
    assert registry.get("") is None
    assert registry.get(None) is None
    assert "atom" not in registry


def test_duplicate_registration_requires_replace() -> None:
    original = FakePullClient()
    replacement = FakePullClient()
    registry = PullClientRegistry({"rss": original})

    with pytest.raises(ValueError, match="already registered"):
        registry.register("rss", replacement)

    registry.register("rss", replacement, replace=True)
    assert registry.get("rss") is replacement


def test_blank_transport_type_is_rejected() -> None:
    with pytest.raises(ValueError, match="blank"):
        PullClientRegistry().register("  ", FakePullClient())
