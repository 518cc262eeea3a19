"""
Job domain module
"""
from .models import (
    Config,
    CopyStep,
    DockerBuild,
    DockerStep,
    Job,
    RestartPolicy,
    Step,
    StepType,
)
from .hasher import StepHasher
from .service import JobService

__all__ = [
    "Config",
    "CopyStep",
    "DockerBuild",
    "DockerStep",
    "Job",
    "JobService",
    "RestartPolicy",
    "Step",
    "StepHasher",
    "StepType",
]
