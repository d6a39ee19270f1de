"""Base key provider interface.

All key providers must implement this interface so the KMS dispatcher can
route operations to them without knowing anything about the backend.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

# Generic options bag accepted at the dispatcher boundary. Each provider
# family parses it into its own typed options.
SignOptions = Mapping[str, Any]


class KmsKeyType(str, Enum):
    """Built-in key type tags."""
    BABYJUBJUB = "BJJ"
    SECP256K1 = "Secp256k1"
    ED25519 = "Ed25519"

    def __str__(self) -> str:
        return self.value


# Any string is a valid tag; KmsKeyType covers the built-in ones.
KeyType = KmsKeyType | str


def key_type_tag(key_type: KeyType) -> str:
    """Normalize a key type to the plain string used as the registry key."""
    return str(key_type)


def key_path(key_type: KeyType, key_id: str) -> str:
    """Build the provider-specific identifier ``<type>:<key id>``."""
    return f"{key_type_tag(key_type)}:{key_id}"


@dataclass(frozen=True)
class KmsKeyId:
    """Identifier of a key managed by the KMS.

    Attributes:
        type: Key type tag used to route the key back to its provider
        id: Provider-specific identifier, opaque to the dispatcher
    """
    type: str
    id: str

    def __post_init__(self):
        object.__setattr__(self, "type", key_type_tag(self.type))


@dataclass(frozen=True)
class KeyListEntry:
    """A key returned by ``KeyProvider.list``."""
    alias: str
    key: str


class KeyProvider(ABC):
    """Abstract base class for key providers.

    One concrete provider exists per key type or backend. Implementations
    own key derivation, storage and signing; the KMS only forwards calls.
    """

    @property
    @abstractmethod
    def key_type(self) -> str:
        """Return the key type tag this provider serves."""
        pass

    @abstractmethod
    async def list(self) -> list[KeyListEntry]:
        """List every key the provider manages.

        Returns:
            Key entries, ordering unspecified

        Raises:
            ProviderUnavailableError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    async def public_key(self, key_id: KmsKeyId) -> str:
        """Get the encoded public key for a key.

        Args:
            key_id: Key identifier

        Returns:
            Public key material (hex)

        Raises:
            KeyNotFoundError: If the key is unknown to this provider
        """
        pass

    @abstractmethod
    async def sign(
        self,
        key_id: KmsKeyId,
        data: bytes,
        opts: SignOptions | None = None,
    ) -> bytes:
        """Sign data with a key.

        Args:
            key_id: Key identifier
            data: Payload bytes
            opts: Provider-specific options; unrecognized keys are ignored

        Returns:
            Signature bytes

        Raises:
            KeyNotFoundError: If the key is unknown to this provider
            SigningError: If signing fails
        """
        pass

    @abstractmethod
    async def new_private_key_from_seed(self, seed: bytes) -> KmsKeyId:
        """Create a key from seed bytes.

        Args:
            seed: Seed material

        Returns:
            Identifier whose type equals ``self.key_type``

        Raises:
            InvalidSeedError: If the seed is not acceptable to the backend
        """
        pass

    @abstractmethod
    async def verify(
        self,
        message: bytes,
        signature_hex: str,
        key_id: KmsKeyId,
    ) -> bool:
        """Verify a signature.

        A well-formed signature that does not match returns False.

        Args:
            message: Signed payload
            signature_hex: Signature as hex
            key_id: Key identifier

        Returns:
            True if the signature is valid

        Raises:
            KeyNotFoundError: If the key is unknown to this provider
            InvalidSignatureEncodingError: If the signature is malformed
        """
        pass


class KMSError(Exception):
    """Base exception for KMS operations."""
    pass


class ProviderNotFoundError(KMSError):
    """No provider is registered for the key type."""

    def __init__(self, key_type: KeyType):
        self.key_type = key_type_tag(key_type)
        super().__init__(f"Key provider not found for: {self.key_type}")


class DuplicateProviderError(KMSError):
    """A provider is already registered for the key type."""

    def __init__(self, key_type: KeyType):
        self.key_type = key_type_tag(key_type)
        super().__init__(f"Key provider already registered for: {self.key_type}")


class KeyTypeMismatchError(KMSError):
    """Provider serves a different key type than the one it is registered under."""
    pass


class KeyProviderError(KMSError):
    """Base exception for errors raised by key providers."""
    pass


class KeyNotFoundError(KeyProviderError):
    """Key not found in the provider."""
    pass


class SigningError(KeyProviderError):
    """Signing failed."""
    pass


class UnsupportedSignOptionError(SigningError):
    """A recognized signing option has an unsupported value."""
    pass


class InvalidSeedError(KeyProviderError):
    """Seed length or format is not acceptable."""
    pass


class InvalidSignatureEncodingError(KeyProviderError):
    """Signature is not a well-formed encoding for the key type."""
    pass


class ProviderUnavailableError(KeyProviderError):
    """Provider backend could not be reached."""
    pass
