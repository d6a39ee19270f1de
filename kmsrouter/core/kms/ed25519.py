"""Ed25519 software key provider.

The 32-byte seed is used directly as the Ed25519 private key (RFC 8032),
so the same seed always yields the same key. Signatures are deterministic
and 64 bytes long. Public keys are exposed as raw 32-byte hex.
"""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from .base import (
    InvalidSignatureEncodingError,
    KmsKeyId,
    KmsKeyType,
    SignOptions,
)
from .local import LocalKeyProvider

SIGNATURE_SIZE = 64


def _public_hex(private_key: ed25519.Ed25519PrivateKey) -> str:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    ).hex()


class Ed25519Provider(LocalKeyProvider):
    """Ed25519 keys held in a local private key store.

    No signing options are recognized; any ``opts`` passed to ``sign`` are
    ignored.
    """

    default_key_type = KmsKeyType.ED25519

    async def _load(self, key_id: KmsKeyId) -> ed25519.Ed25519PrivateKey:
        private_hex = await self._private_key_hex(key_id)
        return ed25519.Ed25519PrivateKey.from_private_bytes(bytes.fromhex(private_hex))

    async def new_private_key_from_seed(self, seed: bytes) -> KmsKeyId:
        seed = self._check_seed(seed)
        private_key = ed25519.Ed25519PrivateKey.from_private_bytes(seed)
        return await self._import(_public_hex(private_key), seed.hex())

    async def public_key(self, key_id: KmsKeyId) -> str:
        return _public_hex(await self._load(key_id))

    async def sign(
        self,
        key_id: KmsKeyId,
        data: bytes,
        opts: SignOptions | None = None,
    ) -> bytes:
        private_key = await self._load(key_id)
        return private_key.sign(bytes(data))

    async def verify(
        self,
        message: bytes,
        signature_hex: str,
        key_id: KmsKeyId,
    ) -> bool:
        signature = self._decode_signature(signature_hex)
        if len(signature) != SIGNATURE_SIZE:
            raise InvalidSignatureEncodingError(
                f"Ed25519 signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}"
            )

        public_key = (await self._load(key_id)).public_key()
        try:
            public_key.verify(signature, bytes(message))
            return True
        except InvalidSignature:
            return False
