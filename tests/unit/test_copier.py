"""
Unit tests for the Copier.
"""
import os
import stat
from unittest.mock import MagicMock

import pytest

from nship.domain.sync import Copier


@pytest.fixture
def source(tmp_path):
    root = tmp_path / "local"
    (root / "bin").mkdir(parents=True)
    (root / "index.html").write_text("<html></html>")
    (root / "debug.log").write_text("noise")
    (root / "bin" / "run.sh").write_text("#!/bin/sh\necho run\n")
    os.chmod(root / "bin" / "run.sh", 0o755)
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "node_modules" / "dep" / "index.js").write_text("1")
    return root


class TestCopyFile:
    """Single file transfer."""

    def test_creates_parents_and_copies_mode(self, tmp_path, remote_fs):
        local = tmp_path / "app.conf"
        local.write_text("port=80")
        os.chmod(local, 0o640)

        Copier(remote_fs).copy_path(str(local), "/etc/app/app.conf")

        remote = remote_fs.local("/etc/app/app.conf")
        assert remote.read_text() == "port=80"
        assert remote_fs.chmods["/etc/app/app.conf"] == 0o640
        assert stat.S_IMODE(os.stat(remote).st_mode) == 0o640

    def test_missing_local_raises(self, tmp_path, remote_fs):
        with pytest.raises(FileNotFoundError):
            Copier(remote_fs).copy_path(str(tmp_path / "missing"), "/srv/x")


class TestCopyDir:
    """Recursive transfer with exclusions and the size heuristic."""

    def test_copies_tree(self, source, remote_fs):
        Copier(remote_fs).copy_path(str(source), "/srv/site")

        assert remote_fs.local("/srv/site/index.html").read_text() == "<html></html>"
        assert remote_fs.local("/srv/site/bin/run.sh").exists()
        assert remote_fs.chmods["/srv/site/bin/run.sh"] == 0o755

    def test_exclusions(self, source, remote_fs):
        Copier(remote_fs).copy_path(str(source), "/srv/site", exclude=["*.log", "node_modules"])

        assert not remote_fs.local("/srv/site/debug.log").exists()
        assert not remote_fs.local("/srv/site/node_modules").exists()
        assert remote_fs.local("/srv/site/index.html").exists()

    def test_sorted_order(self, source, remote_fs):
        Copier(remote_fs).copy_path(str(source), "/srv/site", exclude=["node_modules"])
        assert remote_fs.created == [
            "/srv/site/bin/run.sh",
            "/srv/site/debug.log",
            "/srv/site/index.html",
        ]

    def test_same_size_file_is_not_resent(self, source, remote_fs):
        remote_fs.mkdir_all("/srv/site")
        remote_fs.local("/srv/site/index.html").write_text("<body></body>")

        Copier(remote_fs).copy_path(str(source), "/srv/site", exclude=["node_modules"])

        assert "/srv/site/index.html" not in remote_fs.created
        assert remote_fs.local("/srv/site/index.html").read_text() == "<body></body>"

    def test_different_size_file_is_resent(self, source, remote_fs):
        remote_fs.mkdir_all("/srv/site")
        remote_fs.local("/srv/site/index.html").write_text("old")

        Copier(remote_fs).copy_path(str(source), "/srv/site", exclude=["node_modules"])

        assert remote_fs.local("/srv/site/index.html").read_text() == "<html></html>"

    def test_remote_stat_error_propagates(self, source):
        fs = MagicMock()
        fs.stat.side_effect = PermissionError("denied")
        with pytest.raises(PermissionError):
            Copier(fs).copy_path(str(source), "/srv/site")

    def test_should_transfer_missing_remote(self, source, remote_fs):
        info = os.stat(source / "index.html")
        assert Copier(remote_fs).should_transfer_file(info, "/nowhere/index.html")
