"""Key management dispatcher.

The KMS owns one key provider per key type and forwards each operation to
the provider for the key type involved. It performs no cryptography,
retries, caching or argument translation itself. Provider errors propagate
unchanged.

Registration is expected to happen once at startup, before concurrent use.
"""

from kmsrouter.core.logging import get_logger, log_operation

from .base import (
    DuplicateProviderError,
    KeyListEntry,
    KeyProvider,
    KeyType,
    KeyTypeMismatchError,
    KmsKeyId,
    ProviderNotFoundError,
    SignOptions,
    key_type_tag,
)

logger = get_logger(__name__)


class KMS:
    """Key management system routing operations to key providers.

    Usage:
        kms = KMS()
        kms.register_key_provider(KmsKeyType.ED25519, Ed25519Provider(store))
        key_id = await kms.create_key_from_seed(KmsKeyType.ED25519, seed)
        signature = await kms.sign(key_id, b"payload")
    """

    def __init__(self):
        self._registry: dict[str, KeyProvider] = {}

    def register_key_provider(self, key_type: KeyType, provider: KeyProvider) -> None:
        """Register a key provider for a key type.

        Args:
            key_type: Key type tag
            provider: Provider serving that key type

        Raises:
            DuplicateProviderError: If the key type already has a provider
            KeyTypeMismatchError: If the provider serves a different key type
        """
        tag = key_type_tag(key_type)
        if tag in self._registry:
            raise DuplicateProviderError(tag)

        provider_tag = key_type_tag(provider.key_type)
        if provider_tag != tag:
            raise KeyTypeMismatchError(
                f"Provider {type(provider).__name__} serves '{provider_tag}', "
                f"cannot register it for '{tag}'"
            )

        self._registry[tag] = provider
        logger.info(
            "Registered key provider",
            key_type=tag,
            provider=type(provider).__name__,
        )

    def get_key_provider(self, key_type: KeyType) -> KeyProvider | None:
        """Get the provider registered for a key type, if any."""
        return self._registry.get(key_type_tag(key_type))

    @property
    def key_types(self) -> list[str]:
        """Key types with a registered provider, in registration order."""
        return list(self._registry)

    def _provider(self, key_type: KeyType) -> KeyProvider:
        provider = self.get_key_provider(key_type)
        if provider is None:
            raise ProviderNotFoundError(key_type)
        return provider

    @log_operation("kms.create_key_from_seed")
    async def create_key_from_seed(self, key_type: KeyType, seed: bytes) -> KmsKeyId:
        """Create a key from seed bytes with the provider for ``key_type``."""
        return await self._provider(key_type).new_private_key_from_seed(seed)

    @log_operation("kms.public_key")
    async def public_key(self, key_id: KmsKeyId) -> str:
        """Get the public key for a key identifier."""
        return await self._provider(key_id.type).public_key(key_id)

    @log_operation("kms.sign")
    async def sign(
        self,
        key_id: KmsKeyId,
        data: bytes,
        opts: SignOptions | None = None,
    ) -> bytes:
        """Sign data with the key identified by ``key_id``.

        ``opts`` is passed through untouched; its meaning is provider-specific.
        """
        return await self._provider(key_id.type).sign(key_id, data, opts)

    @log_operation("kms.verify")
    async def verify(self, data: bytes, signature_hex: str, key_id: KmsKeyId) -> bool:
        """Verify a hex signature; a mismatch returns False rather than raising."""
        return await self._provider(key_id.type).verify(data, signature_hex, key_id)

    @log_operation("kms.list")
    async def list(self, key_type: KeyType) -> list[KeyListEntry]:
        """List the keys managed by the provider for ``key_type``."""
        return await self._provider(key_type).list()
