"""
Errors raised by the test-vector generators and the bundle verifier.

Every error carries the stage that failed so the CLI can report it
before exiting with status 1.
"""


class VectorError(Exception):
    """Base class for all generation / verification failures"""

    stage = "generate"

    def __init__(self, detail: str, stage: str = None):
        super().__init__(detail)
        self.detail = detail
        if stage is not None:
            self.stage = stage

    def __str__(self):
        return f"{self.stage}: {self.detail}"


class KeyDerivationError(VectorError):
    stage = "derive keypair"


class SigningError(VectorError):
    stage = "sign"


class SelfVerifyError(VectorError):
    stage = "self-verify"


class OutputDirectoryError(VectorError):
    stage = "prepare output directory"


class ArtifactWriteError(VectorError):
    """A single bundle file could not be written"""

    def __init__(self, artifact: str, detail: str):
        super().__init__(detail, stage=f"write {artifact}")
        self.artifact = artifact


class BundleReadError(VectorError):
    """A bundle file is missing, unreadable or has the wrong size"""

    def __init__(self, artifact: str, detail: str):
        super().__init__(detail, stage=f"read {artifact}")
        self.artifact = artifact


class CrossVerifyError(VectorError):
    stage = "cross-verify"
