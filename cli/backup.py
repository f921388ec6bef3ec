#!/usr/bin/env python3
"""
Backblaze B2 backup CLI

Uploads a local archive to a B2 bucket using the B2 CLI Docker image.
Credentials are read from a .env file in the current directory:

    B2_APPLICATION_KEY_ID=your_key_id_here
    B2_APPLICATION_KEY=your_application_key_here

Usage:
    python -m cli.backup <zip_file_path> <bucket_name> [remote_filename]

Exit status is 0 when the upload succeeded (even if it could not be
verified) and 1 on any error.
"""

import argparse
import logging
import signal
import sys
from datetime import date
from typing import List, Optional

from backup_tools.config import DEFAULT_ENV_FILE, DockerSettings, load_credentials
from backup_tools.docker_runtime import DockerRuntime, Runner
from backup_tools.errors import (
    B2AuthorizationError,
    B2CommandError,
    BackupError,
    ConfigurationError,
    DockerError,
    UsageError,
)
from backup_tools.uploader import report, run_backup
from backup_tools.validator import build_request

logger = logging.getLogger("cli.backup")

EXAMPLES = f"""
Examples:
  python -m cli.backup ./backup.zip my-backup-bucket
  python -m cli.backup ./backup.zip my-backup-bucket backups/{date.today():%Y%m%d}/backup.zip
"""


class BackupArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with 2"""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> BackupArgumentParser:
    parser = BackupArgumentParser(
        prog="b2-backup",
        description="Upload an archive to Backblaze B2 using the B2 CLI Docker image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EXAMPLES,
    )
    parser.add_argument('zip_file', help='Path to the archive to upload')
    parser.add_argument('bucket', help='Destination B2 bucket name')
    parser.add_argument('remote_filename', nargs='?',
                        help='Name inside the bucket (default: archive file name)')
    parser.add_argument('--env-file', default=DEFAULT_ENV_FILE,
                        help=f'Credentials file (default: {DEFAULT_ENV_FILE})')
    parser.add_argument('--image', help='B2 CLI Docker image (default: $B2_DOCKER_IMAGE or tianon/backblaze-b2:latest)')
    parser.add_argument('--skip-pull', action='store_true',
                        help='Use the local image without pulling it first')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log docker commands')
    return parser


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


def _terminate(signum, frame):
    # Turn SIGTERM into SystemExit so cleanup scopes still unwind
    raise SystemExit(128 + signum)


def cmd_backup(args, runner: Optional[Runner] = None) -> int:
    """Load credentials, check preconditions, upload, report"""
    credentials = load_credentials(args.env_file)
    request = build_request(args.zip_file, args.bucket, args.remote_filename)

    settings = DockerSettings.from_env(image=args.image, pull=not args.skip_pull)
    runtime = DockerRuntime(executable=settings.executable, runner=runner)
    runtime.ensure_available()

    result = run_backup(request, credentials, runtime, settings)
    report(result)
    logger.info("Backup process completed successfully!")
    return 0


def main(argv: Optional[List[str]] = None, runner: Optional[Runner] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        print(f"[ERROR] {e.message}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        print(EXAMPLES, file=sys.stderr)
        return 1

    setup_logging(args.verbose)

    previous = signal.signal(signal.SIGTERM, _terminate)
    try:
        return cmd_backup(args, runner)
    except ConfigurationError as e:
        logger.error(e.message)
        logger.info(f"Please ensure {args.env_file} contains:")
        print(e.details.get("hint", ""), file=sys.stderr)
        logger.info(f"Make sure to add {args.env_file} to your .gitignore file!")
        return 1
    except B2AuthorizationError as e:
        logger.error("Failed to authorize with Backblaze B2!")
        logger.error(f"Error details: {e.output.strip()}")
        return 1
    except B2CommandError as e:
        logger.error("Backup failed!")
        logger.error(f"Error details: {e.output.strip()}")
        return 1
    except DockerError as e:
        logger.error(e.message)
        if e.output:
            logger.error(f"Error details: {e.output.strip()}")
        return 1
    except BackupError as e:
        logger.error(e.message)
        return 1
    finally:
        signal.signal(signal.SIGTERM, previous if previous is not None else signal.SIG_DFL)


if __name__ == '__main__':
    sys.exit(main())
