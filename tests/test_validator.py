"""Tests for upload request validation."""

import pytest

from backup_tools.errors import PreconditionError, UsageError
from backup_tools.validator import build_request, default_remote_name


def test_default_remote_name():
    assert default_remote_name("./data/backup.zip") == "backup.zip"
    assert default_remote_name("backup.zip") == "backup.zip"


def test_remote_name_defaults_to_base_name(tmp_path):
    archive = tmp_path / "data" / "backup.zip"
    archive.parent.mkdir()
    archive.write_bytes(b"zip")

    request = build_request(str(archive), "my-bucket")

    assert request.remote_name == "backup.zip"
    assert request.destination_uri == "b2://my-bucket/backup.zip"


def test_relative_path_is_resolved(tmp_path, monkeypatch):
    (tmp_path / "data").mkdir()
    (tmp_path / "data" / "backup.zip").write_bytes(b"zip")
    monkeypatch.chdir(tmp_path)

    request = build_request("./data/backup.zip", "my-bucket")

    assert request.archive_path.is_absolute()
    assert request.archive_path == (tmp_path / "data" / "backup.zip").resolve()
    assert request.archive_dir == (tmp_path / "data").resolve()
    assert request.archive_name == "backup.zip"
    assert request.remote_name == "backup.zip"


def test_explicit_remote_name(tmp_path):
    archive = tmp_path / "backup.zip"
    archive.write_bytes(b"zip")
    request = build_request(archive, "my-bucket", "backups/20240101/backup.zip")
    assert request.remote_name == "backups/20240101/backup.zip"


def test_leading_slash_stripped(tmp_path):
    archive = tmp_path / "backup.zip"
    archive.write_bytes(b"zip")
    assert build_request(archive, "b", "/nightly/backup.zip").remote_name == "nightly/backup.zip"
    assert build_request(archive, "b", "/").remote_name == "backup.zip"


def test_missing_archive(tmp_path):
    with pytest.raises(PreconditionError, match="not found"):
        build_request(tmp_path / "nope.zip", "my-bucket")


def test_directory_is_not_an_archive(tmp_path):
    with pytest.raises(PreconditionError):
        build_request(tmp_path, "my-bucket")


def test_empty_bucket(tmp_path):
    archive = tmp_path / "backup.zip"
    archive.write_bytes(b"zip")
    with pytest.raises(UsageError):
        build_request(archive, "  ")


def test_unreadable_archive(tmp_path, monkeypatch):
    archive = tmp_path / "backup.zip"
    archive.write_bytes(b"zip")
    monkeypatch.setattr("backup_tools.validator.os.access", lambda path, mode: False)

    with pytest.raises(PreconditionError, match="is not readable"):
        build_request(archive, "my-bucket")
