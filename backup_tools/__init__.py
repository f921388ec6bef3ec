"""
Backup Tools

Upload local archives to Backblaze B2 with the dockerized B2 CLI.

Submodules:
- cloud/          : B2 CLI invocations (authorize, upload, list)
- config          : Credentials file and docker settings
- docker_runtime  : docker pull/run/ps/stop/rm wrapper with cleanup scope
- validator       : Argument and archive checks
- uploader        : Orchestration and result reporting
"""

from .errors import (
    BackupError,
    UsageError,
    ConfigurationError,
    PreconditionError,
    DockerError,
    B2CommandError,
    B2AuthorizationError,
    B2UploadError,
)
from .config import B2Credentials, DockerSettings, load_credentials
from .docker_runtime import CommandResult, DockerRuntime
from .validator import UploadRequest, build_request
from .cloud import B2DockerClient
from .uploader import BackupResult, run_backup, report
