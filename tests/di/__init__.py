"""Mock providers for testing."""

from .authentik import MockAuthentikProvider
from .email import MockEmailProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockAuthentikProvider",
    "MockEmailProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
