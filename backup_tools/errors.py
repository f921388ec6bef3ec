"""
Exception hierarchy for the backup uploader.

Every failure that should end a run with exit status 1 derives from
BackupError. Verification problems are not exceptions; they are reported
as warnings by the uploader.
"""

from typing import Dict, Optional


class BackupError(Exception):
    """Base exception for all backup errors"""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UsageError(BackupError):
    """Raised when the command line arguments are wrong"""
    pass


class ConfigurationError(BackupError):
    """
    Raised when the credentials file is missing or incomplete.

    The message names missing keys only, never secret values.
    """
    pass


class PreconditionError(BackupError):
    """Raised when the archive or the container runtime is unavailable"""
    pass


class DockerError(BackupError):
    """Raised when a docker command needed for the run fails"""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message, {"output": output})
        self.output = output


class B2CommandError(BackupError):
    """
    Raised when a delegated B2 CLI operation exits non-zero.

    The captured tool output is kept verbatim in `output`; it is not parsed.
    """

    operation = "b2"

    def __init__(self, returncode: int, output: str = ""):
        super().__init__(
            f"b2 {self.operation} failed with exit code {returncode}",
            {"output": output},
        )
        self.returncode = returncode
        self.output = output


class B2AuthorizationError(B2CommandError):
    """Raised when b2 authorize-account fails"""
    operation = "authorize-account"


class B2UploadError(B2CommandError):
    """Raised when b2 upload-file fails"""
    operation = "upload-file"
