#!/usr/bin/env python3
"""
ML-DSA-87 Cross-Verification Vector

Derives an ML-DSA-87 keypair from the all-zero seed, signs
"Cross-verification test message for ML-DSA-87" with context "ZOND" and
writes:

    $TMPDIR/qrypto_cross_verify/goqrllib_mldsa87_{pk,sig,msg,ctx}.bin

ML-DSA-87 does NOT pre-hash the seed (unlike Dilithium5).
"""

import sys

from generate import main

if __name__ == "__main__":
    sys.exit(main(default_scheme="mldsa87"))
