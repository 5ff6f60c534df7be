#!/usr/bin/env python3
"""
Output Bundle

Writes a test vector to disk for an external verifier, and reads it back.

Layout:
    <tmp>/qrypto_cross_verify/goqrllib_dilithium5_{pk,sig,msg}.bin
    <tmp>/qrypto_cross_verify/goqrllib_mldsa87_{pk,sig,msg,ctx}.bin

The output directory is recreated on every run. Whatever sits at that path
(file, symlink or stale directory) is removed first, so we never write
through a symlink somebody else planted in /tmp.
"""

import os
import shutil
import tempfile

from errors import ArtifactWriteError, BundleReadError, OutputDirectoryError
from schemes import Scheme, Vector

# =============================================================================
# Configuration
# =============================================================================

OUTPUT_DIR_NAME = "qrypto_cross_verify"
DEFAULT_OUTPUT_DIR = os.path.join(tempfile.gettempdir(), OUTPUT_DIR_NAME)

FILE_PREFIX = "goqrllib"  # Name expected by the downstream verifier

DIR_MODE = 0o700   # Owner only
FILE_MODE = 0o600  # Owner read/write only

ARTIFACT_LABELS = {
    "pk": "public key",
    "sig": "signature",
    "msg": "message",
    "ctx": "context",
}

# Debug copies written with --hex
HEX_ARTIFACTS = ["pk", "sig"]


# =============================================================================
# File Names
# =============================================================================

def artifact_names(scheme: Scheme) -> list:
    """Artifacts of a scheme's bundle, in write order"""
    names = ["pk", "sig", "msg"]
    if scheme.has_context:
        names.append("ctx")
    return names


def artifact_path(output_dir: str, scheme: Scheme, artifact: str, ext: str = "bin") -> str:
    """e.g. <output_dir>/goqrllib_mldsa87_sig.bin"""
    return os.path.join(output_dir, f"{FILE_PREFIX}_{scheme.tag}_{artifact}.{ext}")


# =============================================================================
# Write
# =============================================================================

def prepare_output_dir(path: str):
    """
    Replace whatever exists at path with a fresh, empty directory.

    Symlinks are removed, never followed.
    """
    try:
        if os.path.islink(path) or os.path.isfile(path):
            os.unlink(path)
        elif os.path.lexists(path):
            shutil.rmtree(path)
        os.makedirs(path, mode=DIR_MODE)
        os.chmod(path, DIR_MODE)
    except OSError as e:
        raise OutputDirectoryError(f"{path}: {e}") from e


def write_artifact(path: str, data: bytes, label: str):
    """Create path exclusively with FILE_MODE and write data to it"""
    flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL
    flags |= getattr(os, "O_NOFOLLOW", 0) | getattr(os, "O_BINARY", 0)
    try:
        fd = os.open(path, flags, FILE_MODE)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ArtifactWriteError(label, f"{path}: {e}") from e


def write_bundle(output_dir: str, vector: Vector, write_hex: bool = False,
                 prepare: bool = True) -> list:
    """
    Write every artifact of a vector into output_dir.

    Args:
        output_dir: Bundle directory
        vector: The generated vector
        write_hex: Also write hex copies of pk and sig for debugging
        prepare: Recreate output_dir first (False when adding a second
            scheme to a directory prepared in the same run)

    Returns:
        List of written paths
    """
    if prepare:
        prepare_output_dir(output_dir)

    written = []
    for artifact, data in vector.artifacts().items():
        path = artifact_path(output_dir, vector.scheme, artifact)
        write_artifact(path, data, ARTIFACT_LABELS[artifact])
        written.append(path)

    if write_hex:
        files = vector.artifacts()
        for artifact in HEX_ARTIFACTS:
            path = artifact_path(output_dir, vector.scheme, artifact, ext="hex")
            write_artifact(path, files[artifact].hex().encode(),
                           f"{ARTIFACT_LABELS[artifact]} (hex)")
            written.append(path)

    return written


# =============================================================================
# Read
# =============================================================================

def _read_artifact(output_dir: str, scheme: Scheme, artifact: str) -> bytes:
    path = artifact_path(output_dir, scheme, artifact)
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise BundleReadError(ARTIFACT_LABELS[artifact], f"{path}: {e}") from e


def read_bundle(output_dir: str, scheme: Scheme) -> Vector:
    """Load a bundle written by write_bundle (or by another implementation)"""
    public_key = _read_artifact(output_dir, scheme, "pk")
    signature = _read_artifact(output_dir, scheme, "sig")
    message = _read_artifact(output_dir, scheme, "msg")
    context = None
    if scheme.has_context:
        context = _read_artifact(output_dir, scheme, "ctx")

    if len(public_key) != scheme.public_key_bytes:
        raise BundleReadError(
            "public key",
            f"{len(public_key)} bytes, expected {scheme.public_key_bytes}",
        )
    if len(signature) > scheme.signature_bytes:
        raise BundleReadError(
            "signature",
            f"{len(signature)} bytes, at most {scheme.signature_bytes} expected",
        )

    return Vector(
        scheme=scheme,
        public_key=public_key,
        signature=signature,
        message=message,
        context=context,
    )
