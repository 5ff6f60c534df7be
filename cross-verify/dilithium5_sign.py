#!/usr/bin/env python3
"""
Dilithium5 Cross-Verification Vector

Derives a Dilithium5 keypair from the all-zero seed, signs
"Cross-verification test message for Dilithium5" and writes:

    $TMPDIR/qrypto_cross_verify/goqrllib_dilithium5_{pk,sig,msg}.bin

The seed is hashed with SHAKE256 before key generation, matching go-qrllib.
"""

import sys

from generate import main

if __name__ == "__main__":
    sys.exit(main(default_scheme="dilithium5"))
