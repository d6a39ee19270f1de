"""Key management dispatch layer.

Routes key operations to pluggable providers by key type:
- KMS: registry and dispatcher, one provider per key type
- KeyProvider: interface every backend implements
- Ed25519 / Secp256k1: local software providers over a private key store

Any backend (software keystore, cloud KMS, HSM) can be plugged in by
implementing KeyProvider and registering it with a KMS instance.
"""

from .base import (
    DuplicateProviderError,
    InvalidSeedError,
    InvalidSignatureEncodingError,
    KeyListEntry,
    KeyNotFoundError,
    KeyProvider,
    KeyProviderError,
    KeyTypeMismatchError,
    KMSError,
    KmsKeyId,
    KmsKeyType,
    ProviderNotFoundError,
    ProviderUnavailableError,
    SigningError,
    UnsupportedSignOptionError,
    key_path,
)
from .ed25519 import Ed25519Provider
from .factory import create_kms, register_provider_class
from .registry import KMS
from .secp256k1 import Secp256k1Provider, Secp256k1SignOptions, SignatureFormat
from .store import InMemoryPrivateKeyStore, PrivateKeyStore

__all__ = [
    "KMS",
    "KeyProvider",
    "KmsKeyId",
    "KmsKeyType",
    "KeyListEntry",
    "key_path",
    "PrivateKeyStore",
    "InMemoryPrivateKeyStore",
    "Ed25519Provider",
    "Secp256k1Provider",
    "Secp256k1SignOptions",
    "SignatureFormat",
    "create_kms",
    "register_provider_class",
    "KMSError",
    "ProviderNotFoundError",
    "DuplicateProviderError",
    "KeyTypeMismatchError",
    "KeyProviderError",
    "KeyNotFoundError",
    "SigningError",
    "UnsupportedSignOptionError",
    "InvalidSeedError",
    "InvalidSignatureEncodingError",
    "ProviderUnavailableError",
]
