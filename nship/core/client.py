"""
Paramiko SSH client wrapper
"""
import sys
import threading
from pathlib import Path
from typing import IO, List, Optional, Tuple

import paramiko

from .constants import DEFAULT_DIAL_TIMEOUT, DEFAULT_SSH_PORT
from .logging import get_logger

logger = get_logger(__name__)

# Tried in order; a key file that none of them can parse is dropped
_KEY_CLASSES = (paramiko.Ed25519Key, paramiko.ECDSAKey, paramiko.RSAKey)


class RemoteClient:
    """
    Thin wrapper around paramiko.SSHClient.

    - password and private-key authentication, key preferred
    - streaming command execution with live stdout/stderr
    - a cached SFTP session
    - usable as a context manager
    """

    def __init__(
        self,
        host: str,
        user: str,
        port: int = DEFAULT_SSH_PORT,
        password: Optional[str] = None,
        key_path: Optional[str] = None,
        timeout: float = DEFAULT_DIAL_TIMEOUT,
    ) -> None:
        self.host = host
        self.user = user
        self.port = port
        self.password = password or None
        self.key_path = key_path or None
        self.timeout = timeout

        self.client = paramiko.SSHClient()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        self._sftp: Optional[paramiko.SFTPClient] = None

    # --------------------
    # Connection management
    # --------------------
    def connect(self) -> None:
        pkey = self._load_private_key(self.key_path) if self.key_path else None
        self.client.connect(
            hostname=self.host,
            port=self.port,
            username=self.user,
            password=self.password,
            pkey=pkey,
            timeout=self.timeout,
            allow_agent=False,
            look_for_keys=False,
        )
        logger.debug(f"Connected to {self.user}@{self.host}:{self.port}")

    def _load_private_key(self, path: str) -> Optional[paramiko.PKey]:
        """Parse a private key file; None when no known key type fits"""
        p = Path(path).expanduser()
        for key_class in _KEY_CLASSES:
            try:
                return key_class.from_private_key_file(str(p))
            except (paramiko.SSHException, OSError, ValueError):
                continue
        logger.debug(f"Could not load private key {p}, falling back to password")
        return None

    # --------------------
    # Helpers
    # --------------------
    def exec_streaming(
        self,
        cmd: str,
        stdout: Optional[IO[str]] = None,
        stderr: Optional[IO[str]] = None,
    ) -> Tuple[int, str]:
        """
        Run a command, copying its output to local streams as it arrives.

        Both streams are drained by their own thread; the call returns only
        after the remote exit status is known and both threads have finished.

        Returns:
            (exit_code, combined output)
        """
        transport = self.client.get_transport()
        if transport is None or not transport.is_active():
            raise paramiko.SSHException("SSH session is not active")

        channel = transport.open_session()
        try:
            channel.exec_command(cmd)
            captured: List[str] = []
            lock = threading.Lock()
            readers = [
                threading.Thread(
                    target=_pump,
                    args=(channel.makefile("rb"), stdout or sys.stdout, captured, lock),
                    daemon=True,
                ),
                threading.Thread(
                    target=_pump,
                    args=(channel.makefile_stderr("rb"), stderr or sys.stderr, captured, lock),
                    daemon=True,
                ),
            ]
            for reader in readers:
                reader.start()

            exit_code = channel.recv_exit_status()
            for reader in readers:
                reader.join()
            return exit_code, "".join(captured)
        finally:
            channel.close()

    def open_sftp(self) -> paramiko.SFTPClient:
        """Return the SFTP session, opening it on first use"""
        if self._sftp is None or self._sftp.get_channel() is None:
            self._sftp = self.client.open_sftp()
        return self._sftp

    def close(self) -> None:
        if self._sftp is not None:
            self._sftp.close()
            self._sftp = None
        self.client.close()

    def __enter__(self) -> "RemoteClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def _pump(source, sink: IO[str], captured: List[str], lock: threading.Lock) -> None:
    for raw in source:
        line = raw.decode("utf-8", errors="replace")
        with lock:
            captured.append(line)
            sink.write(line)
            sink.flush()
