"""
Shared test doubles for remote file systems and step clients.
"""
import os
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

from nship.core.exceptions import CommandError, ConnectionError
from nship.core.interfaces import ClientFactory, RemoteFileSystem, StepClient
from nship.domain.target import Target


class FakeRemoteFileSystem(RemoteFileSystem):
    """Maps remote paths onto a local directory and records writes."""

    def __init__(self, root: Path):
        self.root = root
        self.created: List[str] = []
        self.chmods = {}

    def local(self, path: str) -> Path:
        return self.root / path.lstrip("/")

    def mkdir_all(self, path: str) -> None:
        self.local(path).mkdir(parents=True, exist_ok=True)

    def create(self, path: str):
        self.created.append(path)
        return open(self.local(path), "wb")

    def chmod(self, path: str, mode: int) -> None:
        self.chmods[path] = mode
        os.chmod(self.local(path), mode)

    def stat(self, path: str):
        return os.stat(self.local(path))


class RecordingStepClient(StepClient):
    """Records executed steps; fails on the configured step number."""

    def __init__(self, target: Target, log: List[Tuple[str, int]], fail_on: Optional[int] = None):
        self.target = target
        self.log = log
        self.fail_on = fail_on
        self.closed = False

    def execute_step(self, step, step_num, total_steps):
        self.log.append((self.target.get_name(), step_num))
        if step_num == self.fail_on:
            raise CommandError("sh -c 'false'", Exception("Process exited with status 1"))

    def close(self):
        self.closed = True


class RecordingClientFactory(ClientFactory):
    """Hands out RecordingStepClients sharing one execution log."""

    def __init__(self, fail_on: Optional[int] = None, unreachable: Tuple[str, ...] = ()):
        self.executed: List[Tuple[str, int]] = []
        self.clients: List[RecordingStepClient] = []
        self.fail_on = fail_on
        self.unreachable = unreachable

    def new_client(self, target):
        if target.get_name() in self.unreachable:
            raise ConnectionError(target.get_name(), "connection refused")
        client = RecordingStepClient(target, self.executed, self.fail_on)
        self.clients.append(client)
        return client

    def step_nums(self):
        return [num for _, num in self.executed]


@pytest.fixture
def remote_fs(tmp_path):
    root = tmp_path / "remote"
    root.mkdir()
    return FakeRemoteFileSystem(root)


@pytest.fixture
def target():
    return Target(host="10.0.0.5", user="deploy", name="web", password="secret")


@pytest.fixture
def client_factory():
    return RecordingClientFactory()
