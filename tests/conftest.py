"""Shared fixtures: a scripted docker runner and a working directory with credentials."""

import subprocess

import pytest


class FakeDocker:
    """
    Stands in for subprocess.run when docker is invoked.

    Calls are recorded as (argv, kwargs). Each call is classified into an
    operation (pull, authorize, upload, list, ps, ps-exited, stop, rm) and
    answered with the scripted (returncode, stdout) for that operation.
    """

    DEFAULTS = {
        "list": (0, "backup.zip\n"),
    }

    def __init__(self, **responses):
        self.calls = []
        self.responses = dict(self.DEFAULTS)
        self.responses.update(responses)

    @staticmethod
    def classify(cmd):
        sub = cmd[1]
        if sub == "run":
            if "-c" not in cmd:
                return "run"
            script = cmd[cmd.index("-c") + 1]
            if "upload-file" in script:
                return "upload"
            if "b2 ls" in script:
                return "list"
            return "authorize"
        if sub == "ps":
            return "ps-exited" if "-a" in cmd else "ps"
        return sub

    def __call__(self, cmd, **kwargs):
        self.calls.append((list(cmd), kwargs))
        returncode, stdout = self.responses.get(self.classify(cmd), (0, ""))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout)

    def ops(self):
        return [self.classify(cmd) for cmd, _ in self.calls]

    def count(self, op):
        return self.ops().count(op)


@pytest.fixture
def fake_docker():
    return FakeDocker()


@pytest.fixture(autouse=True)
def clean_docker_env(monkeypatch):
    monkeypatch.delenv("B2_DOCKER_IMAGE", raising=False)
    monkeypatch.delenv("DOCKER_BIN", raising=False)


@pytest.fixture
def docker_on_path(monkeypatch):
    monkeypatch.setattr(
        "backup_tools.docker_runtime.shutil.which",
        lambda name: f"/usr/bin/{name}",
    )


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """cwd containing a valid .env and ./backup.zip"""
    (tmp_path / ".env").write_text(
        "B2_APPLICATION_KEY_ID=test-key-id\n"
        "B2_APPLICATION_KEY=test-secret-key\n"
    )
    (tmp_path / "backup.zip").write_bytes(b"PK\x05\x06" + b"\x00" * 18)
    monkeypatch.chdir(tmp_path)
    return tmp_path
