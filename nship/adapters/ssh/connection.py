"""
Client factory implementation
"""
from typing import Optional

from rich.console import Console

from ...core.client import RemoteClient
from ...core.constants import DEFAULT_DIAL_TIMEOUT
from ...core.exceptions import ConnectionError
from ...core.interfaces import ClientFactory
from ...core.logging import get_logger
from ...domain.target import Target
from .sftp import SFTPFileSystem
from .step_client import SSHStepClient

logger = get_logger(__name__)


class SSHClientFactory(ClientFactory):
    """Connects to targets over SSH and hands out step clients"""

    def __init__(self, timeout: float = DEFAULT_DIAL_TIMEOUT, console: Optional[Console] = None):
        self.timeout = timeout
        self.console = console

    def new_client(self, target: Target) -> SSHStepClient:
        """
        Connect to a target and open its SFTP session.

        Raises:
            ConnectionError: If the connection or the SFTP session fails
        """
        client = RemoteClient(
            host=target.host,
            user=target.user,
            port=target.get_port(),
            password=target.password,
            key_path=target.private_key,
            timeout=self.timeout,
        )

        try:
            client.connect()
        except Exception as e:
            raise ConnectionError(target.get_name(), e) from e

        try:
            sftp = client.open_sftp()
        except Exception as e:
            client.close()
            raise ConnectionError(target.get_name(), e) from e

        logger.info(f"Connected to {target.get_name()} ({target.user}@{target.host}:{target.get_port()})")
        return SSHStepClient(client, SFTPFileSystem(sftp), console=self.console)
