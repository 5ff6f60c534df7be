#!/usr/bin/env python3
"""
Cross-Verification Vector Generator

Generates Dilithium5 and ML-DSA-87 signatures from a fixed all-zero seed and
writes them to disk so another implementation can verify them byte for byte.

Flow (per scheme):
    1. Derive keypair from the fixed seed
    2. Sign the fixed message (and context, for ML-DSA-87)
    3. Verify our own signature
    4. Recreate the output directory
    5. Write pk / sig / msg (/ ctx)

Any failure stops the run with exit status 1. Success is only reported
once every file has been written.

Usage:
    python generate.py dilithium5
    python generate.py mldsa87 --hex
    python generate.py all --output-dir ./vectors
"""

import argparse
import sys

from bundle import DEFAULT_OUTPUT_DIR, prepare_output_dir, write_bundle
from errors import SelfVerifyError, VectorError
from schemes import (
    SCHEMES,
    ZERO_SEED,
    Scheme,
    Vector,
    derive_keypair,
    get_scheme,
    sign,
    verify,
)


# =============================================================================
# Generate
# =============================================================================

def generate_vector(scheme: Scheme, seed: bytes = ZERO_SEED) -> Vector:
    """
    Derive, sign and self-verify one test vector.

    The message and context are the scheme's compiled-in constants.
    """
    public_key, secret_key = derive_keypair(scheme, seed)

    message = scheme.message_bytes
    signature = sign(scheme, secret_key, message, scheme.context)

    if not verify(scheme, public_key, message, signature, scheme.context):
        raise SelfVerifyError(f"{scheme.name} signature does not verify under its own key")

    return Vector(
        scheme=scheme,
        public_key=public_key,
        signature=signature,
        message=message,
        context=scheme.context,
        seed=seed,
    )


# =============================================================================
# Console Output
# =============================================================================

def print_header(scheme: Scheme, seed: bytes):
    print("=" * 60)
    print(f"{scheme.name} Signature Generation")
    print("=" * 60)
    print(f"Seed:    {seed.hex()}")
    print(f"Message: \"{scheme.message}\"")
    if scheme.has_context:
        print(f"Context: \"{scheme.context.decode()}\"")


def print_vector(vector: Vector):
    print(f"[*] Public key size: {len(vector.public_key)} bytes")
    print(f"[*] Signature size: {len(vector.signature)} bytes")
    print(f"[*] Public key (first 32 bytes): {vector.public_key[:32].hex()}")
    print(f"[*] Signature (first 32 bytes): {vector.signature[:32].hex()}")
    print("[*] Self-verify: PASSED")


# =============================================================================
# Pipeline
# =============================================================================

def run(schemes: list, output_dir: str = DEFAULT_OUTPUT_DIR, write_hex: bool = False,
        seed: bytes = ZERO_SEED) -> list:
    """
    Generate vectors for the given schemes and write them to output_dir.

    All vectors are generated before the directory is touched, so a failing
    scheme never leaves a bundle behind from this run.

    Returns:
        List of written paths
    """
    vectors = []
    for scheme in schemes:
        print_header(scheme, seed)
        vector = generate_vector(scheme, seed)
        print_vector(vector)
        print()
        vectors.append(vector)

    print(f"[*] Preparing output directory: {output_dir}")
    prepare_output_dir(output_dir)

    written = []
    for vector in vectors:
        written += write_bundle(output_dir, vector, write_hex=write_hex, prepare=False)

    print("\nOutput files written:")
    for path in written:
        print(f"  {path}")
    print("\n✓ signature generation complete")
    return written


# =============================================================================
# Main
# =============================================================================

def build_parser(default_scheme: str = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate Dilithium5 / ML-DSA-87 cross-verification vectors"
    )

    if default_scheme is None:
        parser.add_argument(
            "scheme",
            choices=sorted(SCHEMES) + ["all"],
            help="Scheme to generate a vector for"
        )

    parser.add_argument(
        "--output-dir", "-o",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Bundle directory, recreated on every run (default: {DEFAULT_OUTPUT_DIR})"
    )

    parser.add_argument(
        "--hex",
        action="store_true",
        help="Also write hex copies of the public key and signature"
    )

    if default_scheme is not None:
        parser.set_defaults(scheme=default_scheme)
    return parser


def main(argv=None, default_scheme: str = None) -> int:
    args = build_parser(default_scheme).parse_args(argv)

    if args.scheme == "all":
        schemes = list(SCHEMES.values())
    else:
        schemes = [get_scheme(args.scheme)]

    try:
        run(schemes, args.output_dir, write_hex=args.hex)
    except VectorError as e:
        print(f"ERROR: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
