"""
Backblaze B2 via the dockerized B2 CLI

Authorization, upload and listing are delegated to the `b2` command running
in a throwaway container. Its output is treated as opaque text.
"""

import logging
import posixpath
from typing import List, Optional

from ..config import B2Credentials, DockerSettings, KEY_ID_VAR, KEY_VAR
from ..docker_runtime import CommandResult, DockerRuntime
from ..errors import B2AuthorizationError, B2UploadError
from ..validator import UploadRequest

logger = logging.getLogger(__name__)

# Secrets are expanded inside the container from its environment; bucket,
# paths and remote names arrive as positional parameters ($1, $2, ...).
AUTHORIZE_SCRIPT = f'b2 authorize-account "${KEY_ID_VAR}" "${KEY_VAR}"'
UPLOAD_SCRIPT = AUTHORIZE_SCRIPT + ' && b2 upload-file "$1" "$2" "$3"'
LIST_SCRIPT = AUTHORIZE_SCRIPT + ' && b2 ls "$1" "$2"'


def _sh(script: str, *params: str) -> List[str]:
    # "sh" fills $0 so params start at $1
    return ["sh", "-c", script, "sh", *params]


class B2DockerClient:
    """
    B2 client backed by the dockerized B2 CLI.

    Usage:
        client = B2DockerClient(credentials, DockerRuntime())
        client.authorize()
        client.upload(request)
        listing = client.verify(request)

    Every call starts a fresh container, so upload and verify authorize
    again on their own.
    """

    def __init__(self, credentials: B2Credentials, runtime: DockerRuntime,
                 settings: Optional[DockerSettings] = None):
        self.credentials = credentials
        self.runtime = runtime
        self.settings = settings or DockerSettings()

    def _run(self, command: List[str], volumes=None, merge_stderr: bool = True) -> CommandResult:
        return self.runtime.run(
            self.settings.image,
            command,
            env=self.credentials.as_env(),
            volumes=volumes,
            merge_stderr=merge_stderr,
        )

    def authorize(self) -> CommandResult:
        """
        Authorize once up front so bad credentials fail fast.

        Raises:
            B2AuthorizationError: b2 authorize-account exited non-zero
        """
        logger.info("Authorizing with Backblaze B2...")
        result = self._run(_sh(AUTHORIZE_SCRIPT))
        if not result.ok:
            raise B2AuthorizationError(result.returncode, result.output)
        logger.info("Authorization successful!")
        return result

    def upload(self, request: UploadRequest) -> CommandResult:
        """
        Upload the archive, mounting its directory into the container.

        Raises:
            B2UploadError: authorize or upload-file exited non-zero
        """
        container_path = posixpath.join(self.settings.mount_point, request.archive_name)
        logger.info(f"Uploading {request.archive_name} to bucket {request.bucket}...")
        result = self._run(
            _sh(UPLOAD_SCRIPT, request.bucket, container_path, request.remote_name),
            volumes={str(request.archive_dir): self.settings.mount_point},
        )
        if not result.ok:
            raise B2UploadError(result.returncode, result.output)
        return result

    def verify(self, request: UploadRequest) -> CommandResult:
        """List the uploaded file. Never raises on a non-zero exit."""
        logger.info("Verifying upload...")
        return self._run(
            _sh(LIST_SCRIPT, request.bucket, request.remote_name),
            merge_stderr=False,
        )
