"""Local software key providers.

Shared plumbing for providers that keep private keys in a
``PrivateKeyStore`` inside the process:
- Key identifiers are ``<type>:<public key hex>`` key paths
- Private keys are stored hex-encoded under that path
- Several providers may share one store; each only sees key paths whose
  type segment (everything before the last ``:``) equals its own tag

These providers are meant for development, tests and embedded use.
Production deployments should register an HSM or cloud KMS backed provider.
"""

from kmsrouter.core.logging import get_logger

from .base import (
    InvalidSeedError,
    InvalidSignatureEncodingError,
    KeyListEntry,
    KeyNotFoundError,
    KeyProvider,
    KeyType,
    KmsKeyId,
    KmsKeyType,
    key_path,
    key_type_tag,
)
from .store import PrivateKeyStore

logger = get_logger(__name__)


class LocalKeyProvider(KeyProvider):
    """Base class for providers backed by a local private key store."""

    default_key_type: KmsKeyType
    seed_size = 32

    def __init__(self, store: PrivateKeyStore, key_type: KeyType | None = None):
        """Initialize the provider.

        Args:
            store: Private key store, may be shared with other providers
            key_type: Tag to serve instead of ``default_key_type``
        """
        self._store = store
        self._key_type = key_type_tag(key_type or self.default_key_type)

    @property
    def key_type(self) -> str:
        return self._key_type

    def _owns(self, alias: str) -> bool:
        # Public key hex never contains ":", so the tag is everything before the last one
        return alias.rpartition(":")[0] == self._key_type

    def _check_seed(self, seed: bytes) -> bytes:
        if not isinstance(seed, (bytes, bytearray, memoryview)):
            raise InvalidSeedError(
                f"Seed must be bytes, got {type(seed).__name__}"
            )
        seed = bytes(seed)
        if len(seed) != self.seed_size:
            raise InvalidSeedError(
                f"{self._key_type} seed must be {self.seed_size} bytes, got {len(seed)}"
            )
        return seed

    async def _private_key_hex(self, key_id: KmsKeyId) -> str:
        """Load the hex private key for an identifier owned by this provider."""
        if key_id.type != self._key_type or not self._owns(key_id.id):
            raise KeyNotFoundError(
                f"Key {key_id.id} does not belong to provider {self._key_type}"
            )
        return await self._store.get(key_id.id)

    async def _import(self, public_key_hex: str, private_key_hex: str) -> KmsKeyId:
        """Store a private key and return its identifier."""
        key_id = KmsKeyId(type=self._key_type, id=key_path(self._key_type, public_key_hex))
        await self._store.import_key(key_id.id, private_key_hex)
        logger.info(
            "Key created",
            key_type=self._key_type,
            key_id=key_id.id,
        )
        return key_id

    @staticmethod
    def _decode_signature(signature_hex: str) -> bytes:
        if not isinstance(signature_hex, str):
            raise InvalidSignatureEncodingError("Signature must be a hex string")
        value = signature_hex[2:] if signature_hex.startswith("0x") else signature_hex
        try:
            return bytes.fromhex(value)
        except ValueError as e:
            raise InvalidSignatureEncodingError(f"Signature is not valid hex: {e}")

    async def list(self) -> list[KeyListEntry]:
        """List this provider's keys as (key path, public key hex) pairs."""
        return [
            KeyListEntry(alias=entry.alias, key=entry.alias.rpartition(":")[2])
            for entry in await self._store.list()
            if self._owns(entry.alias)
        ]
