"""
Local to remote copy over a RemoteFileSystem
"""
import os
import posixpath
import shutil
import stat

from ...core.interfaces import RemoteFileSystem
from ...core.logging import get_logger
from .exclude import is_excluded

logger = get_logger(__name__)


class Copier:
    """
    Copy local files and directory trees to a remote file system.

    Directories are walked in sorted order. Excluded entries are skipped,
    and a file is only re-sent when the remote copy is missing or its size
    differs from the local one.
    """

    def __init__(self, fs: RemoteFileSystem):
        self.fs = fs

    def copy_path(self, local: str, remote: str, exclude=None) -> None:
        """Copy a file or a directory, whichever local is"""
        exclude = list(exclude or [])
        info = os.stat(local)
        if stat.S_ISDIR(info.st_mode):
            self.copy_dir(local, remote, exclude)
        else:
            self.copy_file(local, remote)

    def copy_file(self, local: str, remote: str) -> None:
        """Stream one file, creating remote parents and carrying over permission bits"""
        with open(local, "rb") as src:
            mode = os.fstat(src.fileno()).st_mode
            parent = posixpath.dirname(remote)
            if parent:
                self.fs.mkdir_all(parent)
            with self.fs.create(remote) as dst:
                shutil.copyfileobj(src, dst)
        self.fs.chmod(remote, stat.S_IMODE(mode))
        logger.debug(f"[copy] {local} → {remote}")

    def copy_dir(self, local: str, remote: str, exclude) -> None:
        self.fs.mkdir_all(remote)

        for name in sorted(os.listdir(local)):
            local_path = os.path.join(local, name)
            remote_path = posixpath.join(remote, name)

            if is_excluded(local_path, name, exclude):
                logger.debug(f"[skip] {local_path} (excluded)")
                continue

            info = os.stat(local_path)
            if stat.S_ISDIR(info.st_mode):
                self.copy_dir(local_path, remote_path, exclude)
                continue

            if self.should_transfer_file(info, remote_path):
                self.copy_file(local_path, remote_path)
            else:
                logger.debug(f"[skip] {local_path} (same size on remote)")

    def should_transfer_file(self, local_info: os.stat_result, remote_path: str) -> bool:
        """True when the remote file is missing or differs in size"""
        try:
            remote_info = self.fs.stat(remote_path)
        except FileNotFoundError:
            return True
        return remote_info.st_size != local_info.st_size
