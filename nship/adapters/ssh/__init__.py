"""
SSH adapters
"""
from .connection import SSHClientFactory
from .sftp import SFTPFileSystem
from .step_client import SSHStepClient

__all__ = ["SSHClientFactory", "SFTPFileSystem", "SSHStepClient"]
