"""
Docker Runtime - runs the B2 CLI in disposable containers

Only a handful of docker commands are used: pull, run, ps, stop and rm.
Every command is built as an argument list; nothing goes through a shell.
"""

import os
import shutil
import logging
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .config import DEFAULT_DOCKER_BIN
from .errors import DockerError, PreconditionError

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured text of one command"""
    args: Tuple[str, ...]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class DockerRuntime:
    """Wraps the docker CLI"""

    def __init__(self, executable: str = DEFAULT_DOCKER_BIN,
                 runner: Optional[Runner] = None):
        self.executable = executable
        self._runner = runner or subprocess.run

    def is_available(self) -> bool:
        """Check if the docker executable can be found"""
        return shutil.which(self.executable) is not None

    def ensure_available(self) -> None:
        if not self.is_available():
            raise PreconditionError("Docker is not installed or not in PATH!")

    def _exec(self, args: Sequence[str], env: Optional[Dict[str, str]] = None,
              merge_stderr: bool = True) -> CommandResult:
        """Run one docker command, capturing stdout (and stderr if merged)"""
        cmd = [self.executable, *args]
        logger.debug(f"Running: {' '.join(cmd)}")

        proc_env = None
        if env:
            proc_env = os.environ.copy()
            proc_env.update(env)

        try:
            proc = self._runner(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.DEVNULL,
                text=True,
                env=proc_env,
            )
        except OSError as e:
            raise DockerError(f"Could not run {self.executable}: {e}")

        return CommandResult(
            args=tuple(cmd),
            returncode=proc.returncode,
            output=proc.stdout or "",
        )

    def pull(self, image: str) -> CommandResult:
        """Pull an image, raising DockerError on failure"""
        result = self._exec(["pull", image])
        if not result.ok:
            raise DockerError(f"Failed to pull image {image}", result.output)
        return result

    def run(self, image: str, command: Sequence[str],
            env: Optional[Dict[str, str]] = None,
            volumes: Optional[Dict[str, str]] = None,
            merge_stderr: bool = True) -> CommandResult:
        """
        Run a command in a throwaway container (docker run --rm).

        Args:
            image: Image to run
            command: Command and arguments inside the container
            env: Variables for the container. Only the names reach the docker
                 command line; values travel through the process environment.
            volumes: Host path -> container path bind mounts
            merge_stderr: Capture stderr with stdout; otherwise discard it

        Returns:
            CommandResult (a non-zero exit is not raised here)
        """
        args = ["run", "--rm"]
        for name in (env or {}):
            args.extend(["-e", name])
        for host_path, container_path in (volumes or {}).items():
            args.extend(["-v", f"{host_path}:{container_path}"])
        args.append(image)
        args.extend(command)
        return self._exec(args, env=env, merge_stderr=merge_stderr)

    def containers(self, image: str, status: Optional[str] = None) -> List[str]:
        """IDs of containers created from an image, optionally by status"""
        args = ["ps"]
        if status:
            args.append("-a")
        args.extend(["--filter", f"ancestor={image}"])
        if status:
            args.extend(["--filter", f"status={status}"])
        args.append("-q")

        result = self._exec(args, merge_stderr=False)
        if not result.ok:
            raise DockerError(f"Failed to list containers for {image}", result.output)
        return result.output.split()

    def stop(self, container_ids: Sequence[str]) -> None:
        result = self._exec(["stop", *container_ids])
        if not result.ok:
            raise DockerError("Failed to stop containers", result.output)

    def remove(self, container_ids: Sequence[str]) -> None:
        result = self._exec(["rm", *container_ids])
        if not result.ok:
            raise DockerError("Failed to remove containers", result.output)

    def cleanup(self, image: str) -> None:
        """
        Stop running and remove exited containers of an image.

        Safe to call when nothing matches. Docker errors here are logged,
        not raised, so they never mask the outcome of the run.
        """
        logger.info("Cleaning up Docker resources...")
        try:
            running = self.containers(image)
            if running:
                logger.info("Stopping running B2 containers...")
                self.stop(running)

            exited = self.containers(image, status="exited")
            if exited:
                logger.info("Removing exited B2 containers...")
                self.remove(exited)
        except DockerError as e:
            logger.warning(f"Docker cleanup incomplete: {e.message}")
            return
        logger.info("Docker cleanup completed.")

    @contextmanager
    def cleanup_scope(self, image: str) -> Iterator['DockerRuntime']:
        """Run cleanup(image) once when the block exits, however it exits"""
        try:
            yield self
        finally:
            self.cleanup(image)
