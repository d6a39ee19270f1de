"""Tests for private key stores."""

import pytest

from kmsrouter.core.kms import InMemoryPrivateKeyStore, KeyListEntry, KeyNotFoundError


@pytest.mark.asyncio
async def test_import_and_get(store):
    await store.import_key("Ed25519:aa", "01" * 32)

    assert await store.get("Ed25519:aa") == "01" * 32


@pytest.mark.asyncio
async def test_get_missing_alias(store):
    with pytest.raises(KeyNotFoundError):
        await store.get("Ed25519:missing")


@pytest.mark.asyncio
async def test_import_replaces(store):
    await store.import_key("alias", "01")
    await store.import_key("alias", "02")

    assert await store.list() == [KeyListEntry(alias="alias", key="02")]


@pytest.mark.asyncio
async def test_stores_are_isolated():
    first = InMemoryPrivateKeyStore()
    second = InMemoryPrivateKeyStore()
    await first.import_key("alias", "01")

    assert await second.list() == []
