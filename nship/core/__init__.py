"""
Core infrastructure layer
"""
from .client import RemoteClient
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import ClientFactory, HashStore, PromptProvider, RemoteFileSystem, StepClient
from .utils import escape_command, shell_command, quote_value

__all__ = [
    "RemoteClient",
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "ClientFactory",
    "HashStore",
    "PromptProvider",
    "RemoteFileSystem",
    "StepClient",
    "escape_command",
    "shell_command",
    "quote_value",
]
