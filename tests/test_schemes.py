import hashlib

import pytest
from dilithium_py.dilithium import Dilithium5 as RoundThreeDilithium5

from errors import KeyDerivationError, SigningError
from schemes import (
    CONTEXT_MAX_BYTES,
    DILITHIUM5,
    ML_DSA_87,
    SCHEMES,
    ZERO_SEED,
    _ENGINES,
    derive_keypair,
    get_scheme,
    keygen_seed,
    sign,
    verify,
)

# SHAKE256(32 zero bytes)[:32], the seed go-qrllib feeds to Dilithium5 keygen
DILITHIUM5_HASHED_ZERO_SEED = "f5977c8283546a63723bc31d2619124f11db4658643336741df81757d5ad3062"

# rho and K of the zero-seed keypairs. Both open the secret key (rho || K || tr),
# and rho also opens the public key.
# Dilithium5: SHAKE256(hashed seed, 128) -> rho[0:32], K[96:128]
DILITHIUM5_RHO = "b64bc1b2dcc382de5163bac48b2c895e1b1e32c2eaf7ee7b8aa0cd50055eddc8"
DILITHIUM5_KEY = "bf34ae48d1b6b7ea92337942ddb6eaf6dfab887c348d0bd6d5b047d38e3a0961"
# ML-DSA-87: SHAKE256(xi || k=8 || l=7, 128) -> rho[0:32], K[96:128]
ML_DSA_87_RHO = "e45ffc8cc73db885dc662e62a18cd8e3803297117fa5658814a985b5ff1db7b4"
ML_DSA_87_KEY = "8b4b1d93b0d331474ffab799d65a892fdd47bacadc962323a32fb8ba1549d161"


def test_scheme_lookup():
    assert get_scheme("dilithium5") is DILITHIUM5
    assert get_scheme("mldsa87") is ML_DSA_87
    assert sorted(SCHEMES) == ["dilithium5", "mldsa87"]
    with pytest.raises(KeyError):
        get_scheme("falcon1024")


def test_scheme_constants():
    assert DILITHIUM5.message_bytes == b"Cross-verification test message for Dilithium5"
    assert ML_DSA_87.message_bytes == b"Cross-verification test message for ML-DSA-87"
    assert not DILITHIUM5.has_context
    assert ML_DSA_87.context == b"ZOND"
    assert len(ZERO_SEED) == 32 and not any(ZERO_SEED)


def test_dilithium5_seed_is_prehashed():
    assert keygen_seed(DILITHIUM5, ZERO_SEED).hex() == DILITHIUM5_HASHED_ZERO_SEED


def test_mldsa87_seed_is_used_as_is():
    assert keygen_seed(ML_DSA_87, ZERO_SEED) == ZERO_SEED


def test_keypair_sizes(dilithium5_keypair, mldsa87_keypair):
    pk, sk = dilithium5_keypair
    assert len(pk) == DILITHIUM5.public_key_bytes == 2592
    assert len(sk) == DILITHIUM5.secret_key_bytes == 4896

    pk, sk = mldsa87_keypair
    assert len(pk) == ML_DSA_87.public_key_bytes == 2592
    assert len(sk) == ML_DSA_87.secret_key_bytes == 4896


def test_keypair_is_deterministic(dilithium5_keypair, mldsa87_keypair):
    assert derive_keypair(DILITHIUM5) == dilithium5_keypair
    assert derive_keypair(ML_DSA_87) == mldsa87_keypair


def test_different_seed_gives_different_key(mldsa87_keypair):
    pk, _ = derive_keypair(ML_DSA_87, bytes(range(32)))
    assert pk != mldsa87_keypair[0]


def test_keypairs_open_with_seed_expansion(dilithium5_keypair, mldsa87_keypair):
    for (pk, sk), rho, key in [
        (dilithium5_keypair, DILITHIUM5_RHO, DILITHIUM5_KEY),
        (mldsa87_keypair, ML_DSA_87_RHO, ML_DSA_87_KEY),
    ]:
        assert pk[:32].hex() == rho
        assert sk[:32].hex() == rho
        assert sk[32:64].hex() == key


def test_secret_keys_carry_64_byte_tr(dilithium5_keypair, mldsa87_keypair):
    for pk, sk in (dilithium5_keypair, mldsa87_keypair):
        assert sk[64:128] == hashlib.shake_256(pk).digest(64)


def test_mldsa87_matches_library_key_derive(mldsa87_keypair):
    assert _ENGINES[ML_DSA_87.tag].key_derive(ZERO_SEED) == mldsa87_keypair


def test_derivation_leaves_library_randomness_alone():
    derive_keypair(DILITHIUM5)
    derive_keypair(ML_DSA_87)
    for engine in _ENGINES.values():
        assert engine.random_bytes.__name__ == "urandom"


@pytest.mark.parametrize("seed", [b"", bytes(16), bytes(33)])
def test_wrong_seed_length_is_rejected(seed):
    with pytest.raises(KeyDerivationError) as exc_info:
        derive_keypair(ML_DSA_87, seed)
    assert exc_info.value.stage == "derive keypair"


def test_keygen_failure_is_tagged(monkeypatch):
    class BrokenEngine:
        def key_derive(self, seed):
            raise RuntimeError("boom")

    monkeypatch.setitem(_ENGINES, DILITHIUM5.tag, BrokenEngine())
    with pytest.raises(KeyDerivationError, match="boom"):
        derive_keypair(DILITHIUM5)


def test_dilithium5_signature(dilithium5_keypair):
    pk, sk = dilithium5_keypair
    msg = DILITHIUM5.message_bytes
    sig = sign(DILITHIUM5, sk, msg)

    assert len(sig) == DILITHIUM5.signature_bytes == 4595
    assert sign(DILITHIUM5, sk, msg) == sig
    assert verify(DILITHIUM5, pk, msg, sig)
    assert not verify(DILITHIUM5, pk, msg + b"!", sig)


def test_dilithium5_is_not_the_32_byte_tr_variant(dilithium5_keypair, dilithium5_vector):
    pk, sk = dilithium5_keypair
    msg = DILITHIUM5.message_bytes

    # Same pk, but mu = H(tr || m) differs, so round-3 Dilithium5 rejects it
    assert not RoundThreeDilithium5.verify(pk, msg, dilithium5_vector.signature)

    with pytest.raises(ValueError):
        RoundThreeDilithium5.sign(sk, msg)


def test_dilithium5_rejects_context(dilithium5_keypair):
    _, sk = dilithium5_keypair
    with pytest.raises(SigningError, match="does not take a context"):
        sign(DILITHIUM5, sk, DILITHIUM5.message_bytes, b"ZOND")


def test_mldsa87_signature(mldsa87_keypair):
    pk, sk = mldsa87_keypair
    msg = ML_DSA_87.message_bytes
    sig = sign(ML_DSA_87, sk, msg, b"ZOND")

    assert len(sig) == ML_DSA_87.signature_bytes == 4627
    assert sign(ML_DSA_87, sk, msg, b"ZOND") == sig
    assert verify(ML_DSA_87, pk, msg, sig, b"ZOND")
    assert not verify(ML_DSA_87, pk, msg, sig, b"ZONE")
    assert not verify(ML_DSA_87, pk, msg, sig)


def test_context_changes_signature_not_key(mldsa87_keypair):
    pk, sk = mldsa87_keypair
    msg = ML_DSA_87.message_bytes

    with_ctx = sign(ML_DSA_87, sk, msg, b"ZOND")
    empty_ctx = sign(ML_DSA_87, sk, msg)
    other_ctx = sign(ML_DSA_87, sk, msg, b"ZONE")

    assert len({with_ctx, empty_ctx, other_ctx}) == 3
    assert verify(ML_DSA_87, pk, msg, empty_ctx)
    # Key derivation never sees the context
    assert derive_keypair(ML_DSA_87)[0] == pk


def test_context_length_limit(mldsa87_keypair):
    pk, sk = mldsa87_keypair
    msg = ML_DSA_87.message_bytes

    sig = sign(ML_DSA_87, sk, msg, bytes(CONTEXT_MAX_BYTES))
    assert verify(ML_DSA_87, pk, msg, sig, bytes(CONTEXT_MAX_BYTES))

    with pytest.raises(SigningError) as exc_info:
        sign(ML_DSA_87, sk, msg, bytes(CONTEXT_MAX_BYTES + 1))
    assert exc_info.value.stage == "sign"
    assert "max 255" in str(exc_info.value)


def test_vector_artifacts(dilithium5_vector, mldsa87_vector):
    assert list(dilithium5_vector.artifacts()) == ["pk", "sig", "msg"]
    files = mldsa87_vector.artifacts()
    assert list(files) == ["pk", "sig", "msg", "ctx"]
    assert files["ctx"] == b"ZOND"
    assert files["msg"] == ML_DSA_87.message_bytes
