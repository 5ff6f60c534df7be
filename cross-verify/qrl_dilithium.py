#!/usr/bin/env python3
"""
Dilithium5 as Used by go-qrllib / qrypto.js

Round-3 Dilithium with the reference v3.1 secret key layout: tr = H(pk) is
64 bytes instead of 32, so the secret key is 4896 bytes and mu = H(tr || m)
changes with it. Everything else (matrix expansion, packing of pk and sig,
the 32-byte challenge seed) is dilithium-py's round-3 code.

    sk = rho (32) || key (32) || tr (64) || s1 || s2 || t0
"""

from dilithium_py.dilithium.dilithium import Dilithium
from dilithium_py.dilithium.default_parameters import DEFAULT_PARAMETERS

SEED_BYTES = 32
TR_BYTES = 64


class QRLDilithium(Dilithium):
    """Dilithium with a 64-byte tr and a seeded key derivation."""

    def _sk_seed_bytes(self) -> int:
        return 2 * SEED_BYTES + TR_BYTES

    def _sk_size(self) -> int:
        s_bytes = 96 if self.eta == 2 else 128
        return self._sk_seed_bytes() + s_bytes * (self.l + self.k) + 416 * self.k

    def key_derive(self, seed: bytes):
        """
        Derive (pk, sk) from a 32-byte seed.

        The seed is expanded with SHAKE256 into rho (32), rho' (64) and
        key (32) exactly as keygen does with its random seed.
        """
        if len(seed) != SEED_BYTES:
            raise ValueError(f"seed must be {SEED_BYTES} bytes long")

        seed_bytes = self._h(seed, 128)
        rho, rho_prime, K = seed_bytes[:32], seed_bytes[32:96], seed_bytes[96:]

        A_hat = self._expand_matrix_from_seed(rho)
        s1, s2 = self._expand_vector_from_seed(rho_prime)

        t = (A_hat @ s1.to_ntt()).from_ntt() + s2
        t1, t0 = t.power_2_round(self.d)

        pk = self._pack_pk(rho, t1)
        tr = self._h(pk, TR_BYTES)
        sk = self._pack_sk(rho, K, tr, s1, s2, t0)
        return pk, sk

    def keygen(self):
        return self.key_derive(self.random_bytes(SEED_BYTES))

    def _unpack_sk(self, sk_bytes):
        if len(sk_bytes) != self._sk_size():
            raise ValueError("SK packed bytes is of the wrong length")

        s_bytes = 96 if self.eta == 2 else 128
        s1_len = s_bytes * self.l
        s2_len = s_bytes * self.k

        seed_len = self._sk_seed_bytes()
        rho = sk_bytes[:32]
        K = sk_bytes[32:64]
        tr = sk_bytes[64:seed_len]

        vec_bytes = sk_bytes[seed_len:]
        s1 = self.M.bit_unpack_s(vec_bytes[:s1_len], self.l, self.eta)
        s2 = self.M.bit_unpack_s(vec_bytes[s1_len:s1_len + s2_len], self.k, self.eta)
        t0 = self.M.bit_unpack_t0(vec_bytes[s1_len + s2_len:], self.k)
        return rho, K, tr, s1, s2, t0

    # sign() is inherited: it takes tr from the unpacked secret key

    def verify(self, pk_bytes, m, sig_bytes):
        rho, t1 = self._unpack_pk(pk_bytes)
        try:
            c_tilde, z, h = self._unpack_sig(sig_bytes)
        except ValueError:
            return False

        if h.sum_hint() > self.omega:
            return False
        if z.check_norm_bound(self.gamma_1 - self.beta):
            return False

        A_hat = self._expand_matrix_from_seed(rho)

        tr = self._h(pk_bytes, TR_BYTES)
        mu = self._h(tr + m, 64)
        c = self.R.sample_in_ball(c_tilde, self.tau).to_ntt()

        t1 = t1.scale(1 << self.d).to_ntt()
        Az_minus_ct1 = ((A_hat @ z.to_ntt()) - t1.scale(c)).from_ntt()

        w_prime = h.use_hint(Az_minus_ct1, 2 * self.gamma_2)
        return c_tilde == self._h(mu + w_prime.bit_pack_w(self.gamma_2), 32)


Dilithium5 = QRLDilithium(DEFAULT_PARAMETERS["dilithium5"])
