"""Infrastructure providers."""

# Import bases
from .authentik import AuthentikProvider
from .email import EmailProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .authentik import ProdAuthentikProvider  # noqa: F401
from .email import ProdEmailProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "AuthentikProvider",
    "EmailProvider",
    "PersistenceProvider",
    "ProdAuthentikProvider",
    "ProdEmailProvider",
    "ProdPersistenceProvider",
]
