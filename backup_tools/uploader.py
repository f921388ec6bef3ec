"""
Backup upload orchestration.

pull -> authorize -> upload -> verify, all inside a cleanup scope so
containers left behind by the B2 CLI image are always cleaned up.
"""

import sys
import logging
from dataclasses import dataclass
from typing import Optional, TextIO

from .cloud.b2 import B2DockerClient
from .config import B2Credentials, DockerSettings
from .docker_runtime import DockerRuntime
from .validator import UploadRequest

logger = logging.getLogger(__name__)


@dataclass
class BackupResult:
    """Outcome of a successful upload"""
    request: UploadRequest
    verified: bool = False
    listing: str = ""


def run_backup(request: UploadRequest, credentials: B2Credentials,
               runtime: DockerRuntime,
               settings: Optional[DockerSettings] = None) -> BackupResult:
    """
    Upload an archive to B2.

    Returns:
        BackupResult; verified is False when listing failed or came back empty

    Raises:
        DockerError: image pull failed
        B2AuthorizationError: credentials rejected
        B2UploadError: upload failed
    """
    settings = settings or DockerSettings()
    client = B2DockerClient(credentials, runtime, settings)

    logger.info("Starting backup process...")
    logger.info(f"File: {request.archive_path}")
    logger.info(f"Bucket: {request.bucket}")
    logger.info(f"Remote path: {request.remote_name}")

    with runtime.cleanup_scope(settings.image):
        if settings.pull:
            logger.info("Pulling Backblaze B2 CLI Docker image...")
            runtime.pull(settings.image)

        client.authorize()
        client.upload(request)

        result = BackupResult(request=request)
        listing = client.verify(request)
        if listing.ok and listing.output.strip():
            logger.info("Upload verified successfully!")
            result.verified = True
            result.listing = listing.output.strip()
        else:
            logger.warning("Could not verify upload, but upload appeared successful")

    return result


def report(result: BackupResult, stream: Optional[TextIO] = None) -> None:
    """Print the destination and, when verified, the listing"""
    stream = stream or sys.stdout
    print("Backup completed successfully!", file=stream)
    print(f"File uploaded to: {result.request.destination_uri}", file=stream)
    if result.verified:
        print(result.listing, file=stream)
