#!/usr/bin/env python3
"""
Signature Schemes for Cross-Verification

Deterministic key derivation and signing for the two schemes we produce
test vectors for. The lattice math lives in dilithium-py; this module only
pins the inputs so every run yields the same bytes:

    Dilithium5 (QRL)      round 3 with a 64-byte tr (see qrl_dilithium),
                          seed is pre-hashed with SHAKE256 before keygen,
                          signing is deterministic, no context.
    ML-DSA-87 (FIPS 204)  raw seed is used as xi, signing is deterministic
                          (rnd = 0^32) and binds a context string.
"""

import hashlib
from dataclasses import dataclass
from typing import Optional

from dilithium_py.ml_dsa import ML_DSA_87 as _ML_DSA_87_ENGINE

from errors import KeyDerivationError, SigningError
from qrl_dilithium import Dilithium5 as _DILITHIUM5_ENGINE

# =============================================================================
# Configuration
# =============================================================================

SEED_BYTES = 32
ZERO_SEED = bytes(SEED_BYTES)  # Fixed test seed (all zeros)

CONTEXT_MAX_BYTES = 255  # FIPS 204 limit on ctx

DILITHIUM5_MESSAGE = "Cross-verification test message for Dilithium5"
ML_DSA_87_MESSAGE = "Cross-verification test message for ML-DSA-87"
ML_DSA_87_CONTEXT = b"ZOND"  # Standard context used by QRL


@dataclass(frozen=True)
class Scheme:
    """Fixed parameters and inputs of one signature scheme."""
    name: str                 # Display name
    tag: str                  # Used in output file names
    oqs_name: Optional[str]   # liboqs mechanism name, None if liboqs has no match
    public_key_bytes: int
    secret_key_bytes: int
    signature_bytes: int
    message: str
    context: Optional[bytes]  # None when the scheme has no context
    prehash_seed: bool

    @property
    def message_bytes(self) -> bytes:
        return self.message.encode("utf-8")

    @property
    def has_context(self) -> bool:
        return self.context is not None


DILITHIUM5 = Scheme(
    name="Dilithium5",
    tag="dilithium5",
    oqs_name=None,  # liboqs Dilithium5 is not the go-qrllib variant
    public_key_bytes=2592,
    secret_key_bytes=4896,
    signature_bytes=4595,
    message=DILITHIUM5_MESSAGE,
    context=None,
    prehash_seed=True,
)

ML_DSA_87 = Scheme(
    name="ML-DSA-87",
    tag="mldsa87",
    oqs_name="ML-DSA-87",
    public_key_bytes=2592,
    secret_key_bytes=4896,
    signature_bytes=4627,
    message=ML_DSA_87_MESSAGE,
    context=ML_DSA_87_CONTEXT,
    prehash_seed=False,
)

SCHEMES = {scheme.tag: scheme for scheme in (DILITHIUM5, ML_DSA_87)}

_ENGINES = {
    DILITHIUM5.tag: _DILITHIUM5_ENGINE,
    ML_DSA_87.tag: _ML_DSA_87_ENGINE,
}


def get_scheme(tag: str) -> Scheme:
    """Look up a scheme by its file tag (dilithium5 / mldsa87)"""
    return SCHEMES[tag]


# =============================================================================
# Key Derivation
# =============================================================================

def keygen_seed(scheme: Scheme, seed: bytes) -> bytes:
    """
    Return the 32 bytes that are actually fed to key generation.

    Dilithium5 hashes the seed with SHAKE256 first (go-qrllib does the same
    internally), ML-DSA-87 uses it unchanged.
    """
    if scheme.prehash_seed:
        return hashlib.shake_256(seed).digest(SEED_BYTES)
    return bytes(seed)


def derive_keypair(scheme: Scheme, seed: bytes = ZERO_SEED) -> tuple[bytes, bytes]:
    """
    Deterministically derive a keypair from a fixed seed.

    Args:
        scheme: DILITHIUM5 or ML_DSA_87
        seed: SEED_BYTES of input, all zeros by default

    Returns:
        (public_key, secret_key)
    """
    if len(seed) != SEED_BYTES:
        raise KeyDerivationError(f"seed must be {SEED_BYTES} bytes, got {len(seed)}")

    engine = _ENGINES[scheme.tag]
    try:
        public_key, secret_key = engine.key_derive(keygen_seed(scheme, seed))
    except Exception as e:
        raise KeyDerivationError(f"{scheme.name} keygen failed: {e}") from e

    if len(public_key) != scheme.public_key_bytes:
        raise KeyDerivationError(
            f"public key is {len(public_key)} bytes, expected {scheme.public_key_bytes}"
        )
    if len(secret_key) != scheme.secret_key_bytes:
        raise KeyDerivationError(
            f"secret key is {len(secret_key)} bytes, expected {scheme.secret_key_bytes}"
        )
    return public_key, secret_key


# =============================================================================
# Signing
# =============================================================================

def sign(scheme: Scheme, secret_key: bytes, message: bytes, context: bytes = None) -> bytes:
    """
    Sign a message deterministically.

    Args:
        scheme: DILITHIUM5 or ML_DSA_87
        secret_key: Secret key from derive_keypair
        message: Raw message bytes
        context: Context bytes (ML-DSA-87 only, at most 255 bytes)

    Returns:
        The detached signature (scheme.signature_bytes long)
    """
    engine = _ENGINES[scheme.tag]
    try:
        if not scheme.has_context:
            if context:
                raise SigningError(f"{scheme.name} does not take a context")
            signature = engine.sign(secret_key, message)
        else:
            context = context or b""
            if len(context) > CONTEXT_MAX_BYTES:
                raise SigningError(
                    f"context is {len(context)} bytes (max {CONTEXT_MAX_BYTES})"
                )
            signature = engine.sign(secret_key, message, ctx=context, deterministic=True)
    except SigningError:
        raise
    except Exception as e:
        raise SigningError(f"{scheme.name} signing failed: {e}") from e

    if len(signature) != scheme.signature_bytes:
        raise SigningError(
            f"signature is {len(signature)} bytes, expected {scheme.signature_bytes}"
        )
    return signature


def verify(scheme: Scheme, public_key: bytes, message: bytes, signature: bytes,
           context: bytes = None) -> bool:
    """Verify a signature with dilithium-py"""
    engine = _ENGINES[scheme.tag]
    if not scheme.has_context:
        return engine.verify(public_key, message, signature)
    return engine.verify(public_key, message, signature, ctx=context or b"")


# =============================================================================
# Test Vector
# =============================================================================

@dataclass(frozen=True)
class Vector:
    """One generated (or read back) cross-verification vector"""
    scheme: Scheme
    public_key: bytes
    signature: bytes
    message: bytes
    context: Optional[bytes] = None
    seed: Optional[bytes] = None  # Not persisted, None when read from disk

    def artifacts(self) -> dict:
        """Bytes of every file in the bundle, in write order"""
        files = {
            "pk": self.public_key,
            "sig": self.signature,
            "msg": self.message,
        }
        if self.scheme.has_context:
            files["ctx"] = self.context or b""
        return files
