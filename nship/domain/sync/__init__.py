"""
Sync domain module
"""
from .copier import Copier
from .exclude import is_excluded, normalize_path

__all__ = ["Copier", "is_excluded", "normalize_path"]
