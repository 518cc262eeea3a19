"""
End-to-end deployment runs against an in-process remote.

Run steps are recorded, copy steps go through the real Copier into a
temporary directory, and fingerprints persist in a real hash file.
"""
import os

import pytest

from nship import new_builder, run_config
from nship.core.interfaces import ClientFactory, StepClient
from nship.domain.job import JobService, StepType
from nship.domain.sync import Copier
from nship.domain.target import Target
from nship.infrastructure.state import FileHashStore
from tests.conftest import FakeRemoteFileSystem


class LocalStepClient(StepClient):
    def __init__(self, fs, log):
        self.fs = fs
        self.log = log

    def execute_step(self, step, step_num, total_steps):
        self.log.append(step_num)
        if step.type is StepType.COPY:
            Copier(self.fs).copy_path(step.copy.local, step.copy.remote, step.copy.exclude)

    def close(self):
        pass


class LocalClientFactory(ClientFactory):
    def __init__(self, fs):
        self.fs = fs
        self.executed = []

    def new_client(self, target):
        return LocalStepClient(self.fs, self.executed)


@pytest.fixture
def workspace(tmp_path):
    source = tmp_path / "dirX"
    (source / "conf").mkdir(parents=True)
    (source / "conf" / "app.ini").write_text("[app]\nport=80\n")
    (source / "index.html").write_text("<h1>hi</h1>")
    remote_root = tmp_path / "remote"
    remote_root.mkdir()
    return source, FakeRemoteFileSystem(remote_root), tmp_path / "hashes.json"


def _touch(path):
    info = os.stat(path)
    os.utime(path, ns=(info.st_atime_ns, info.st_mtime_ns + 5_000_000_000))


class TestSkipUnchanged:
    """Fingerprints across repeated runs."""

    def test_run_then_copy(self, workspace):
        source, fs, hash_file = workspace
        config = (
            new_builder()
            .add_target(Target(host="h1", user="deploy", password="pw"))
            .add_job("site")
            .add_run_step("echo a")
            .add_copy_step(str(source), "/dirY")
            .get_config()
        )
        config.apply_defaults()
        store = FileHashStore(hash_file)
        factory = LocalClientFactory(fs)
        service = JobService(factory, hash_store=store)

        service.execute_jobs(config.targets, config.jobs)
        assert factory.executed == [1, 2]
        assert fs.local("/dirY/conf/app.ini").read_text() == "[app]\nport=80\n"
        assert store.get_hash("h1", "site", 0) and store.get_hash("h1", "site", 1)

        factory.executed.clear()
        JobService(factory, hash_store=FileHashStore(hash_file)).execute_jobs(config.targets, config.jobs)
        assert factory.executed == []

        _touch(source / "conf" / "app.ini")
        JobService(factory, hash_store=FileHashStore(hash_file)).execute_jobs(config.targets, config.jobs)
        assert factory.executed == [2]

    def test_force_forward_after_changed_copy(self, workspace):
        source, fs, hash_file = workspace
        config = (
            new_builder()
            .add_target(Target(host="h1", user="deploy", password="pw"))
            .add_job("site")
            .add_run_step("echo before")
            .add_copy_step(str(source), "/dirY", exclude=["*.tmp"])
            .add_run_step("echo after")
            .get_config()
        )
        config.apply_defaults()
        factory = LocalClientFactory(fs)

        JobService(factory, hash_store=FileHashStore(hash_file)).execute_jobs(config.targets, config.jobs)
        factory.executed.clear()

        (source / "scratch.tmp").write_text("ignored")
        JobService(factory, hash_store=FileHashStore(hash_file)).execute_jobs(config.targets, config.jobs)
        assert factory.executed == []

        (source / "new.txt").write_text("new")
        JobService(factory, hash_store=FileHashStore(hash_file)).execute_jobs(config.targets, config.jobs)
        assert factory.executed == [2, 3]
        assert fs.local("/dirY/new.txt").exists()
        assert not fs.local("/dirY/scratch.tmp").exists()

    def test_run_config_without_store_runs_everything(self, workspace):
        source, fs, _ = workspace
        config = (
            new_builder()
            .add_target(Target(host="h1", user="deploy", password="pw"))
            .add_job()
            .add_run_step("echo a")
            .get_config()
        )
        factory = LocalClientFactory(fs)
        run_config(config, client_factory=factory)
        run_config(config, job_name="job-1", client_factory=factory)
        assert factory.executed == [1, 1]
