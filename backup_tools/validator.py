"""
Upload request validation.

Turns raw command line values into an UploadRequest with an absolute
archive path and a final remote name.
"""

import os
from pathlib import Path
from typing import Optional, Union
from dataclasses import dataclass

from .errors import PreconditionError, UsageError


@dataclass(frozen=True)
class UploadRequest:
    """What to upload and where"""
    archive_path: Path
    bucket: str
    remote_name: str

    @property
    def archive_dir(self) -> Path:
        return self.archive_path.parent

    @property
    def archive_name(self) -> str:
        return self.archive_path.name

    @property
    def destination_uri(self) -> str:
        return f"b2://{self.bucket}/{self.remote_name}"


def default_remote_name(archive: Union[str, Path]) -> str:
    """Base name of the archive, e.g. ./data/backup.zip -> backup.zip"""
    return os.path.basename(os.fspath(archive))


def build_request(archive: Union[str, Path], bucket: str,
                  remote_name: Optional[str] = None) -> UploadRequest:
    """
    Validate invocation parameters.

    Args:
        archive: Path to the local archive file
        bucket: Destination bucket name
        remote_name: Key inside the bucket (default: archive base name)

    Raises:
        UsageError: bucket name is empty
        PreconditionError: archive is not an existing, readable regular file
    """
    if not bucket or not bucket.strip():
        raise UsageError("Bucket name must not be empty")

    archive_path = Path(archive)
    if not archive_path.is_file():
        raise PreconditionError(f"Zip file '{archive}' not found!")
    if not os.access(archive_path, os.R_OK):
        raise PreconditionError(f"Zip file '{archive}' is not readable!")

    # B2 file names are keys, not absolute paths; a leading "/" would become
    # part of the stored name
    remote = (remote_name or "").lstrip("/")
    if not remote:
        remote = default_remote_name(archive)

    return UploadRequest(
        archive_path=archive_path.resolve(),
        bucket=bucket.strip(),
        remote_name=remote,
    )
