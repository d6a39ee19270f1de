"""KMS factory.

Builds a KMS with the providers named in configuration. Each call returns a
new instance; pass it to consumers rather than sharing a global.
"""

from typing import Callable

from kmsrouter.config import Settings, get_settings
from kmsrouter.core.logging import get_logger

from .base import KeyProvider, KeyType, KMSError, KmsKeyType, key_type_tag
from .ed25519 import Ed25519Provider
from .local import LocalKeyProvider
from .registry import KMS
from .secp256k1 import Secp256k1Provider
from .store import InMemoryPrivateKeyStore, PrivateKeyStore

logger = get_logger(__name__)

# Builds a provider for a key type. Provider classes taking
# ``(store, key_type)`` qualify, as does any factory function.
ProviderBuilder = Callable[[PrivateKeyStore, str], KeyProvider]

# Registry of provider builders by key type
_providers: dict[str, ProviderBuilder] = {
    key_type_tag(KmsKeyType.ED25519): Ed25519Provider,
    key_type_tag(KmsKeyType.SECP256K1): Secp256k1Provider,
}


def register_provider_class(key_type: KeyType, builder: ProviderBuilder) -> None:
    """Register a provider builder for use by ``create_kms``.

    Allows adding new providers, including HSM or cloud backed ones that
    ignore the store, without modifying this module. The table is shared by
    the whole process; register at startup.

    Args:
        key_type: Key type tag the builder is called for
        builder: Callable taking ``(store, key_type)`` and returning a KeyProvider
    """
    _providers[key_type_tag(key_type)] = builder
    logger.info("Registered key provider class", key_type=key_type_tag(key_type))


def available_providers() -> list[str]:
    """Key types ``create_kms`` knows how to build."""
    return list(_providers)


def create_kms(
    settings: Settings | None = None,
    store: PrivateKeyStore | None = None,
) -> KMS:
    """Create a KMS with the providers listed in ``settings.providers``.

    In production, software providers are still registered but a warning is
    logged for each one.

    Args:
        settings: Settings to read; defaults to the environment
        store: Private key store passed to every builder; in-memory if omitted

    Returns:
        KMS with one provider registered per configured key type

    Raises:
        KMSError: If a configured key type has no provider builder
    """
    settings = settings or get_settings()
    store = store or InMemoryPrivateKeyStore()

    kms = KMS()
    for name in settings.provider_list:
        builder = _providers.get(name)
        if builder is None:
            raise KMSError(
                f"Unknown key provider: {name}. "
                f"Available: {', '.join(available_providers())}"
            )

        provider = builder(store, name)
        if settings.is_production and isinstance(provider, LocalKeyProvider):
            logger.warning(
                "Software key provider registered in production. "
                "Use an HSM or cloud KMS backed provider.",
                key_type=name,
                provider=type(provider).__name__,
            )
        kms.register_key_provider(name, provider)

    logger.info(
        "Created KMS",
        key_types=kms.key_types,
        environment=settings.environment,
    )
    return kms
