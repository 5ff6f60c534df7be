#!/usr/bin/env python3
"""
Cross-Verify a Bundle

Reads a bundle written by generate.py (or by any other implementation using
the same file layout) and checks the signature with an independent
implementation.

Backends:
    liboqs        liboqs-python (default for ML-DSA-87, independent of the
                  generator)
    dilithium-py  the library the generator signs with (default for
                  Dilithium5: liboqs only ships the round-3 variant with a
                  32-byte tr, which go-qrllib does not use)

Usage:
    python verify_bundle.py mldsa87
    python verify_bundle.py dilithium5
    python verify_bundle.py mldsa87 --output-dir ./vectors
"""

import argparse
import sys

from bundle import DEFAULT_OUTPUT_DIR, read_bundle
from errors import CrossVerifyError, VectorError
from schemes import SCHEMES, Scheme, Vector, get_scheme, verify

BACKENDS = ["liboqs", "dilithium-py"]


# =============================================================================
# Signature Verification
# =============================================================================

def _load_oqs():
    try:
        import oqs
    except ImportError as e:
        raise CrossVerifyError(
            "liboqs-python not installed (run: pip install liboqs-python)"
        ) from e
    except SystemExit as e:
        # Raised by liboqs-python when the liboqs shared library cannot be loaded
        raise CrossVerifyError(f"liboqs unavailable: {e}") from e
    return oqs


def verify_with_liboqs(vector: Vector) -> bool:
    """
    Verify a vector with liboqs.

    Uses the context-string API when the scheme carries a context.
    """
    scheme = vector.scheme
    if scheme.oqs_name is None:
        raise CrossVerifyError(
            f"liboqs has no {scheme.name} matching go-qrllib (its Dilithium5 uses a "
            f"32-byte tr); use --backend dilithium-py"
        )

    oqs = _load_oqs()
    if scheme.oqs_name not in oqs.get_enabled_sig_mechanisms():
        raise CrossVerifyError(f"{scheme.oqs_name} is not enabled in this liboqs build")

    with oqs.Signature(scheme.oqs_name) as verifier:
        if scheme.has_context:
            return verifier.verify_with_ctx_str(
                vector.message, vector.signature, vector.context, vector.public_key
            )
        return verifier.verify(vector.message, vector.signature, vector.public_key)


def verify_with_reference(vector: Vector) -> bool:
    """Verify a vector with dilithium-py"""
    try:
        return verify(
            vector.scheme,
            vector.public_key,
            vector.message,
            vector.signature,
            vector.context,
        )
    except ValueError as e:
        raise CrossVerifyError(f"dilithium-py rejected the bundle: {e}") from e


def default_backend(scheme: Scheme) -> str:
    return "liboqs" if scheme.oqs_name else "dilithium-py"


def verify_vector(vector: Vector, backend: str = None) -> bool:
    if backend is None:
        backend = default_backend(vector.scheme)
    if backend == "liboqs":
        return verify_with_liboqs(vector)
    if backend == "dilithium-py":
        return verify_with_reference(vector)
    raise CrossVerifyError(f"unknown backend: {backend}")


# =============================================================================
# Main
# =============================================================================

def print_bundle(scheme: Scheme, vector: Vector, backend: str):
    print("=" * 60)
    print(f"{scheme.name} Verification ({backend})")
    print("=" * 60)
    print(f"PK size:  {len(vector.public_key)} bytes")
    print(f"Sig size: {len(vector.signature)} bytes")
    print(f"Msg size: {len(vector.message)} bytes")
    if scheme.has_context:
        print(f"Ctx size: {len(vector.context)} bytes")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Verify a Dilithium5 / ML-DSA-87 cross-verification bundle"
    )

    parser.add_argument(
        "scheme",
        choices=sorted(SCHEMES),
        help="Scheme of the bundle to verify"
    )

    parser.add_argument(
        "--output-dir", "-o",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Bundle directory (default: {DEFAULT_OUTPUT_DIR})"
    )

    parser.add_argument(
        "--backend", "-b",
        choices=BACKENDS,
        default=None,
        help="Verifier implementation (default: liboqs, dilithium-py for dilithium5)"
    )

    args = parser.parse_args(argv)
    scheme = get_scheme(args.scheme)
    backend = args.backend or default_backend(scheme)

    try:
        vector = read_bundle(args.output_dir, scheme)
        print_bundle(scheme, vector, backend)
        is_valid = verify_vector(vector, backend)
    except VectorError as e:
        print(f"ERROR: {e}")
        return 1

    if is_valid:
        print("\n✓ Signature verification PASSED")
        return 0

    print("\n✗ Signature verification FAILED")
    return 1


if __name__ == "__main__":
    sys.exit(main())
