"""
RemoteFileSystem over a paramiko SFTP session
"""
import posixpath
from typing import BinaryIO

import paramiko

from ...core.interfaces import RemoteFileSystem


class SFTPFileSystem(RemoteFileSystem):
    """Remote file operations backed by paramiko.SFTPClient"""

    def __init__(self, sftp: paramiko.SFTPClient):
        self.sftp = sftp

    def mkdir_all(self, path: str) -> None:
        """Create a directory and its missing parents (like mkdir -p)"""
        path = posixpath.normpath(path)
        if path in ("/", "."):
            return

        current = "/" if path.startswith("/") else ""
        for part in path.split("/"):
            if not part:
                continue
            current = posixpath.join(current, part) if current else part
            try:
                self.sftp.stat(current)
                continue
            except FileNotFoundError:
                pass
            try:
                self.sftp.mkdir(current)
            except IOError:
                # Another writer may have created it in between
                self.sftp.stat(current)

    def create(self, path: str) -> BinaryIO:
        f = self.sftp.open(path, "wb")
        f.set_pipelined(True)
        return f

    def chmod(self, path: str, mode: int) -> None:
        self.sftp.chmod(path, mode)

    def stat(self, path: str) -> paramiko.SFTPAttributes:
        return self.sftp.stat(path)
