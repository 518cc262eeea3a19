"""
Docker domain module
"""
from .builder import build_commands

__all__ = ["build_commands"]
