"""Tests for configuration and the KMS factory."""

import logging

import pytest
from pydantic import ValidationError

from kmsrouter.config import Settings, get_settings
from kmsrouter.core.kms import (
    Ed25519Provider,
    InMemoryPrivateKeyStore,
    KMSError,
    KmsKeyId,
    KmsKeyType,
    Secp256k1Provider,
    create_kms,
    register_provider_class,
)
from kmsrouter.core.kms import factory


class TestSettings:
    """Tests for environment-based settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("KMS_PROVIDERS", raising=False)
        monkeypatch.delenv("KMS_LOG_LEVEL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.provider_list == ["Ed25519", "Secp256k1"]
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.is_production is False
        assert settings.environment == "development"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("KMS_PROVIDERS", " Secp256k1 , ")
        monkeypatch.setenv("KMS_LOG_LEVEL", "warning")
        monkeypatch.setenv("KMS_LOG_JSON", "true")

        settings = get_settings()

        assert settings.provider_list == ["Secp256k1"]
        assert settings.log_level == "WARNING"
        assert settings.log_json is True

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")


class TestCreateKms:
    """Tests for create_kms."""

    def test_registers_configured_providers(self):
        kms = create_kms(Settings(providers="Ed25519,Secp256k1"))

        assert kms.key_types == ["Ed25519", "Secp256k1"]
        assert isinstance(kms.get_key_provider(KmsKeyType.ED25519), Ed25519Provider)
        assert isinstance(kms.get_key_provider(KmsKeyType.SECP256K1), Secp256k1Provider)

    def test_single_provider(self):
        kms = create_kms(Settings(providers="Ed25519"))

        assert kms.key_types == ["Ed25519"]

    def test_unknown_provider(self):
        with pytest.raises(KMSError, match="Unknown key provider: BJJ"):
            create_kms(Settings(providers="BJJ"))

    def test_each_call_returns_new_instance(self):
        settings = Settings(providers="Ed25519")

        assert create_kms(settings) is not create_kms(settings)

    @pytest.mark.asyncio
    async def test_shared_store(self):
        store = InMemoryPrivateKeyStore()
        kms = create_kms(Settings(providers="Ed25519,Secp256k1"), store=store)

        await kms.create_key_from_seed(KmsKeyType.ED25519, b"\x01" * 32)
        await kms.create_key_from_seed(KmsKeyType.SECP256K1, b"\x01" * 32)

        assert len(await store.list()) == 2
        assert len(await kms.list(KmsKeyType.ED25519)) == 1
        assert len(await kms.list(KmsKeyType.SECP256K1)) == 1

    def test_production_warns_about_software_providers(self, caplog):
        with caplog.at_level(logging.WARNING, logger="kmsrouter"):
            kms = create_kms(Settings(providers="Ed25519", environment="production"))

        assert kms.key_types == ["Ed25519"]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].extra_fields["key_type"] == "Ed25519"

    def test_development_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="kmsrouter"):
            create_kms(Settings(providers="Ed25519", environment="development"))

        assert not [r for r in caplog.records if r.levelno == logging.WARNING]


class TestRegisterProviderClass:
    """Tests for adding provider classes to the factory."""

    @pytest.fixture(autouse=True)
    def restore_providers(self):
        saved = dict(factory._providers)
        yield
        factory._providers.clear()
        factory._providers.update(saved)

    @pytest.mark.asyncio
    async def test_custom_key_type(self):
        register_provider_class("test", Ed25519Provider)

        kms = create_kms(Settings(providers="test"))
        key_id = await kms.create_key_from_seed("test", bytes(32))
        signature = await kms.sign(key_id, b"hello")

        assert "test" in factory.available_providers()
        assert key_id.type == "test"
        assert await kms.verify(b"hello", signature.hex(), key_id) is True

    @pytest.mark.asyncio
    async def test_builder_function(self, provider_factory):
        """Any callable returning a KeyProvider can back a key type."""
        built = []

        def build_remote(store, key_type):
            built.append((store, key_type))
            return provider_factory(key_type)

        register_provider_class("remote", build_remote)
        store = InMemoryPrivateKeyStore()

        kms = create_kms(Settings(providers="remote"), store=store)
        provider = kms.get_key_provider("remote")
        await kms.public_key(KmsKeyId(type="remote", id="remote:abcdef"))

        assert built == [(store, "remote")]
        provider.public_key.assert_awaited_once()

    def test_production_does_not_warn_for_remote_providers(self, caplog, provider_factory):
        register_provider_class("remote", lambda store, key_type: provider_factory(key_type))

        with caplog.at_level(logging.WARNING, logger="kmsrouter"):
            create_kms(Settings(providers="remote", environment="production"))

        assert not [r for r in caplog.records if r.levelno == logging.WARNING]
