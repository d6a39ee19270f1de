"""Private key stores used by the software key providers.

Stores map an alias (the key path ``<type>:<public key hex>``) to the
hex-encoded private key. Providers sharing a store keep the entries whose
type segment (before the last ``:``) is their own tag.
"""

from abc import ABC, abstractmethod

from .base import KeyListEntry, KeyNotFoundError


class PrivateKeyStore(ABC):
    """Abstract storage for private key material."""

    @abstractmethod
    async def get(self, alias: str) -> str:
        """Get the private key stored under an alias.

        Raises:
            KeyNotFoundError: If nothing is stored under the alias
        """
        pass

    @abstractmethod
    async def import_key(self, alias: str, key: str) -> None:
        """Store a private key under an alias, replacing any previous value."""
        pass

    @abstractmethod
    async def list(self) -> list[KeyListEntry]:
        """List all stored entries."""
        pass


class InMemoryPrivateKeyStore(PrivateKeyStore):
    """Process-local store. Contents are lost when the process exits."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def get(self, alias: str) -> str:
        key = self._data.get(alias)
        if key is None:
            raise KeyNotFoundError(f"No key found with alias: {alias}")
        return key

    async def import_key(self, alias: str, key: str) -> None:
        self._data[alias] = key

    async def list(self) -> list[KeyListEntry]:
        return [KeyListEntry(alias=alias, key=key) for alias, key in self._data.items()]
