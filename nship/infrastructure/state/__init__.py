"""
State storage implementations
"""
from .hash_store import FileHashStore, MemoryHashStore

__all__ = ["FileHashStore", "MemoryHashStore"]
