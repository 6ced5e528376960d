"""authentik identity provider adapter."""

from .client import AuthentikClient, MockAuthentikClient, RealAuthentikClient

__all__ = ["AuthentikClient", "RealAuthentikClient", "MockAuthentikClient"]
