"""Test configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set up test environment variables BEFORE importing kmsrouter modules
os.environ.setdefault("KMS_PROVIDERS", "Ed25519,Secp256k1")
os.environ.setdefault("KMS_LOG_LEVEL", "DEBUG")

from kmsrouter.config import get_settings
from kmsrouter.core.kms import (
    KMS,
    Ed25519Provider,
    InMemoryPrivateKeyStore,
    KeyProvider,
    KmsKeyId,
    key_path,
)


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset cached settings between tests to ensure clean state."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> InMemoryPrivateKeyStore:
    """Create an empty in-memory private key store."""
    return InMemoryPrivateKeyStore()


@pytest.fixture
def kms() -> KMS:
    """Create an empty KMS."""
    return KMS()


@pytest.fixture
def test_kms(store: InMemoryPrivateKeyStore) -> KMS:
    """Create a KMS with a software provider registered as type "test"."""
    kms = KMS()
    kms.register_key_provider("test", Ed25519Provider(store, key_type="test"))
    return kms


def make_mock_provider(key_type: str) -> MagicMock:
    """Create a provider double whose operations are AsyncMocks."""
    provider = MagicMock(spec=KeyProvider)
    provider.key_type = key_type
    provider.list = AsyncMock(return_value=[])
    provider.public_key = AsyncMock(return_value="04abcdef")
    provider.sign = AsyncMock(return_value=b"\x01\x02\x03")
    provider.new_private_key_from_seed = AsyncMock(
        return_value=KmsKeyId(type=key_type, id=key_path(key_type, "abcdef"))
    )
    provider.verify = AsyncMock(return_value=True)
    return provider


@pytest.fixture
def mock_provider() -> MagicMock:
    """Create a provider double for type "mock"."""
    return make_mock_provider("mock")


@pytest.fixture
def provider_factory():
    """Build additional provider doubles for a given key type."""
    return make_mock_provider
