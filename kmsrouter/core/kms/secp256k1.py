"""Secp256k1 software key provider.

The 32-byte seed is read as a big-endian private scalar and must lie in
``[1, n-1]``. Payloads are hashed with SHA-256 before ECDSA signing
(ES256K). Signatures are low-S normalized and verification rejects
the high-S form.

Signing options:
- ``alg``: only ``"ES256K"`` is supported
- ``format``: ``"raw"`` (compact ``r || s``, default) or ``"der"``

Public keys are exposed as uncompressed SEC1 points in hex.
"""

from dataclasses import dataclass
from enum import Enum

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from .base import (
    InvalidSeedError,
    InvalidSignatureEncodingError,
    KmsKeyId,
    KmsKeyType,
    SignOptions,
    UnsupportedSignOptionError,
)
from .local import LocalKeyProvider

CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SCALAR_SIZE = 32


class SignatureFormat(str, Enum):
    """Output format for signatures."""
    RAW = "raw"  # r || s, 32 bytes each
    DER = "der"  # ASN.1 DER encoded


@dataclass(frozen=True)
class Secp256k1SignOptions:
    """Typed signing options for secp256k1 keys."""
    alg: str = "ES256K"
    format: SignatureFormat = SignatureFormat.RAW

    SUPPORTED_ALGORITHMS = ("ES256K",)

    @classmethod
    def from_mapping(cls, opts: SignOptions | None) -> "Secp256k1SignOptions":
        """Parse a generic options mapping, ignoring unknown keys."""
        opts = opts or {}

        alg = opts.get("alg", cls.alg)
        if alg not in cls.SUPPORTED_ALGORITHMS:
            raise UnsupportedSignOptionError(
                f"Unsupported secp256k1 algorithm: {alg}. "
                f"Supported: {', '.join(cls.SUPPORTED_ALGORITHMS)}"
            )

        try:
            fmt = SignatureFormat(opts.get("format", cls.format))
        except ValueError:
            raise UnsupportedSignOptionError(
                f"Unsupported signature format: {opts.get('format')}. "
                f"Supported: {', '.join(f.value for f in SignatureFormat)}"
            )

        return cls(alg=alg, format=fmt)


def _public_hex(private_key: ec.EllipticCurvePrivateKey) -> str:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    ).hex()


class Secp256k1Provider(LocalKeyProvider):
    """Secp256k1 keys held in a local private key store."""

    default_key_type = KmsKeyType.SECP256K1

    async def _load(self, key_id: KmsKeyId) -> ec.EllipticCurvePrivateKey:
        private_hex = await self._private_key_hex(key_id)
        return ec.derive_private_key(int(private_hex, 16), ec.SECP256K1())

    async def new_private_key_from_seed(self, seed: bytes) -> KmsKeyId:
        seed = self._check_seed(seed)
        scalar = int.from_bytes(seed, "big")
        if not 0 < scalar < CURVE_ORDER:
            raise InvalidSeedError("Secp256k1 seed is not a valid private scalar")

        private_key = ec.derive_private_key(scalar, ec.SECP256K1())
        return await self._import(_public_hex(private_key), seed.hex())

    async def public_key(self, key_id: KmsKeyId) -> str:
        return _public_hex(await self._load(key_id))

    async def sign(
        self,
        key_id: KmsKeyId,
        data: bytes,
        opts: SignOptions | None = None,
    ) -> bytes:
        options = Secp256k1SignOptions.from_mapping(opts)
        private_key = await self._load(key_id)

        r, s = decode_dss_signature(
            private_key.sign(bytes(data), ec.ECDSA(hashes.SHA256()))
        )
        if s > CURVE_ORDER // 2:
            s = CURVE_ORDER - s

        if options.format == SignatureFormat.DER:
            return encode_dss_signature(r, s)
        return r.to_bytes(SCALAR_SIZE, "big") + s.to_bytes(SCALAR_SIZE, "big")

    async def verify(
        self,
        message: bytes,
        signature_hex: str,
        key_id: KmsKeyId,
    ) -> bool:
        signature = self._decode_signature(signature_hex)
        if len(signature) == 2 * SCALAR_SIZE:
            r = int.from_bytes(signature[:SCALAR_SIZE], "big")
            s = int.from_bytes(signature[SCALAR_SIZE:], "big")
        else:
            try:
                r, s = decode_dss_signature(signature)
            except ValueError:
                raise InvalidSignatureEncodingError(
                    "Secp256k1 signature must be 64 raw bytes or DER encoded"
                )

        public_key = (await self._load(key_id)).public_key()
        # Only the low-S form of a signature is accepted
        if s > CURVE_ORDER // 2:
            return False
        signature_der = encode_dss_signature(r, s)
        try:
            public_key.verify(signature_der, bytes(message), ec.ECDSA(hashes.SHA256()))
            return True
        except InvalidSignature:
            return False
