"""
Command line adapters
"""
from .deploy import DeployApp, select_jobs

__all__ = ["DeployApp", "select_jobs"]
