"""
Backup Configuration

Loads B2 credentials from a local KEY=VALUE file and docker settings from
the process environment. Credentials are held in memory only.
"""

import os
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union
from dataclasses import dataclass, field

from dotenv import dotenv_values

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"
KEY_ID_VAR = "B2_APPLICATION_KEY_ID"
KEY_VAR = "B2_APPLICATION_KEY"

DEFAULT_IMAGE = "tianon/backblaze-b2:latest"
DEFAULT_DOCKER_BIN = "docker"
DEFAULT_MOUNT_POINT = "/data"

ENV_FILE_TEMPLATE = f"""{KEY_ID_VAR}=your_key_id_here
{KEY_VAR}=your_application_key_here"""


@dataclass(frozen=True)
class B2Credentials:
    """B2 application key pair"""
    key_id: str
    application_key: str = field(repr=False)

    def as_env(self) -> Dict[str, str]:
        """Environment variables handed to the B2 CLI container"""
        return {
            KEY_ID_VAR: self.key_id,
            KEY_VAR: self.application_key,
        }


@dataclass
class DockerSettings:
    """How the B2 CLI container is run"""
    image: str = DEFAULT_IMAGE
    executable: str = DEFAULT_DOCKER_BIN
    mount_point: str = DEFAULT_MOUNT_POINT
    pull: bool = True

    @classmethod
    def from_env(cls, image: Optional[str] = None, pull: bool = True) -> 'DockerSettings':
        """
        Load settings from environment variables.

        Args:
            image: Explicit image, wins over B2_DOCKER_IMAGE
            pull: Whether to pull the image before running it
        """
        return cls(
            image=image or os.getenv("B2_DOCKER_IMAGE", "") or DEFAULT_IMAGE,
            executable=os.getenv("DOCKER_BIN", "") or DEFAULT_DOCKER_BIN,
            pull=pull,
        )


def _missing_keys(values: Dict[str, Optional[str]]) -> List[str]:
    missing = []
    for key in (KEY_ID_VAR, KEY_VAR):
        value = values.get(key)
        if value is None or not value.strip():
            missing.append(key)
    return missing


def load_credentials(env_file: Union[str, Path] = DEFAULT_ENV_FILE) -> B2Credentials:
    """
    Read B2 credentials from a KEY=VALUE file.

    Unlike load_dotenv() this does not export anything into os.environ.

    Raises:
        ConfigurationError: file is absent or unreadable, or a key is missing or blank
    """
    env_path = Path(env_file)
    if not env_path.is_file():
        raise ConfigurationError(
            f"{env_path} file not found!",
            {"hint": ENV_FILE_TEMPLATE},
        )

    logger.info(f"Loading environment variables from {env_path} file...")
    try:
        values = dotenv_values(env_path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Could not read {env_path}: {e}",
            {"hint": ENV_FILE_TEMPLATE},
        )

    missing = _missing_keys(values)
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}",
            {"hint": ENV_FILE_TEMPLATE},
        )

    return B2Credentials(
        key_id=values[KEY_ID_VAR].strip(),
        application_key=values[KEY_VAR].strip(),
    )
