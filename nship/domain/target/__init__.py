"""
Target domain module
"""
from .models import Target

__all__ = ["Target"]
