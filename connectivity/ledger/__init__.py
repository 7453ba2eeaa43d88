"""Connection-success ledger package."""

from connectivity.ledger.cache import ConnectionCache

__all__ = ["ConnectionCache"]
