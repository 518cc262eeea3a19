"""
nship - multi-target deployment over SSH

Runs declarative jobs (shell commands, file copies, Docker containers) on
remote hosts and skips steps whose configuration and inputs are unchanged.
"""
__version__ = "0.1.0"

from .core.exceptions import NshipError
from .domain.job import Config, CopyStep, DockerBuild, DockerStep, Job, RestartPolicy, Step, StepType
from .domain.target import Target
from .api import load_config, new_builder, new_file_hash_store, run, run_config

__all__ = [
    "__version__",
    "Config",
    "CopyStep",
    "DockerBuild",
    "DockerStep",
    "Job",
    "NshipError",
    "RestartPolicy",
    "Step",
    "StepType",
    "Target",
    "load_config",
    "new_builder",
    "new_file_hash_store",
    "run",
    "run_config",
]
