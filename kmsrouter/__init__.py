"""kmsrouter - key management dispatch.

Routes key operations (create from seed, sign, verify, public key, list)
to pluggable key providers selected by key type:
- Typed dispatcher with explicit provider registration
- Ed25519 and secp256k1 software providers
- Structured logging and environment-based configuration
"""

__version__ = "0.1.0"
__author__ = "kmsrouter Contributors"
