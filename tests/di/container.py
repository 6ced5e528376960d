"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from portal.util.di import PROVIDERS, Component, get_provider


def build_test_container(
    unmock: set[Component] | None = None, fastapi: bool = False
) -> AsyncContainer:
    """Build test container with selective unmocking.

    Settings are loaded from environment variables; tests/conftest.py
    points them at the test policy document.

    Args:
        unmock: Components to use production implementations for.
                All others use mocks.
        fastapi: Add the FastAPI integration provider, for route tests

    Returns:
        Configured test container

    Raises:
        ValueError: If unknown components are named

    Examples:
        # Unit tests - all mocks
        container = build_test_container()

        # Integration tests - real persistence
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    _validate_unmock(unmock)

    provider_instances = []
    for base in PROVIDERS:
        component_name = getattr(base, "__mock_component__", None)
        if component_name is None:
            # Core providers have no mock counterpart
            provider_class = get_provider(base, use_mock=False)
        else:
            provider_class = get_provider(base, use_mock=component_name not in unmock)
        provider_instances.append(provider_class())

    if fastapi:
        provider_instances.append(FastapiProvider())

    return make_async_container(*provider_instances)


def _validate_unmock(unmock: set[Component]) -> None:
    """Reject component names no provider declares."""
    known = {
        getattr(p, "__mock_component__")
        for p in PROVIDERS
        if hasattr(p, "__mock_component__")
    }
    unknown = unmock - known
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")
