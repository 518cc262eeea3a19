"""
Job domain models

A Job is an ordered list of Steps. A Step is a tagged union: its ``type``
names the one populated action (run, copy or docker).
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ...core.constants import DEFAULT_SHELL, JOB_NAME_TEMPLATE
from ...core.exceptions import ConfigError, StepDefinitionError
from ..target import Target


class StepType(str, Enum):
    RUN = "run"
    COPY = "copy"
    DOCKER = "docker"


class RestartPolicy(str, Enum):
    NO = "no"
    ON_FAILURE = "on-failure"
    ALWAYS = "always"
    UNLESS_STOPPED = "unless-stopped"

    @classmethod
    def parse(cls, value: Any) -> Optional["RestartPolicy"]:
        if value is None or value == "":
            return None
        # YAML reads a bare `no` as False
        if value is False:
            return cls.NO
        try:
            return cls(str(value))
        except ValueError as e:
            allowed = ", ".join(p.value for p in cls)
            raise ConfigError(f"invalid restart policy {value!r} (allowed: {allowed})") from e


@dataclass
class CopyStep:
    """Copy a local file or directory to a remote path"""
    local: str
    remote: str
    exclude: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "local": self.local,
            "remote": self.remote,
            "exclude": list(self.exclude),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CopyStep":
        _require_mapping(data, "copy")
        return cls(
            local=str(data.get("local") or ""),
            remote=str(data.get("remote") or ""),
            exclude=_str_list(data.get("exclude"), "copy.exclude"),
        )


@dataclass
class DockerBuild:
    """Image build settings for a Docker step"""
    context: str
    args: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"context": self.context, "args": dict(self.args)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DockerBuild":
        _require_mapping(data, "docker.build")
        return cls(
            context=str(data.get("context") or ""),
            args=_str_map(data.get("args"), "docker.build.args"),
        )


@dataclass
class DockerStep:
    """
    Ensure a container is running with this configuration.

    Attributes:
        image: Image to run (and tag, when build is set)
        name: Container name
        build: Optional build settings
        environment: Environment variables passed with -e
        ports: Port mappings passed with -p
        volumes: Volume mappings passed with -v
        labels: Container labels passed with -l
        networks: Networks to create and connect
        command: Arguments appended after the image
        restart: Restart policy
    """
    image: str
    name: str
    build: Optional[DockerBuild] = None
    environment: Dict[str, str] = field(default_factory=dict)
    ports: List[str] = field(default_factory=list)
    volumes: List[str] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)
    networks: List[str] = field(default_factory=list)
    command: List[str] = field(default_factory=list)
    restart: Optional[RestartPolicy] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": self.image,
            "name": self.name,
            "build": self.build.to_dict() if self.build else None,
            "environment": dict(self.environment),
            "ports": list(self.ports),
            "volumes": list(self.volumes),
            "labels": dict(self.labels),
            "networks": list(self.networks),
            "command": list(self.command),
            "restart": self.restart.value if self.restart else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DockerStep":
        _require_mapping(data, "docker")
        build = data.get("build")
        return cls(
            image=str(data.get("image") or ""),
            name=str(data.get("name") or ""),
            build=DockerBuild.from_dict(build) if build else None,
            environment=_str_map(data.get("environment"), "docker.environment"),
            ports=_str_list(data.get("ports"), "docker.ports"),
            volumes=_str_list(data.get("volumes"), "docker.volumes"),
            labels=_str_map(data.get("labels"), "docker.labels"),
            networks=_str_list(data.get("networks"), "docker.networks"),
            command=_str_list(data.get("command"), "docker.command"),
            restart=RestartPolicy.parse(data.get("restart")),
        )


@dataclass
class Step:
    """
    One unit of deployment work.

    Build steps with ``run_command``, ``copy_files``, ``docker_container`` or
    ``from_dict``; a step whose payload does not match its type is rejected
    at construction.
    """
    type: StepType
    run: Optional[str] = None
    copy: Optional[CopyStep] = None
    docker: Optional[DockerStep] = None
    shell: str = DEFAULT_SHELL

    def __post_init__(self) -> None:
        self.type = StepType(self.type)
        payloads = {
            StepType.RUN: self.run,
            StepType.COPY: self.copy,
            StepType.DOCKER: self.docker,
        }
        if not payloads[self.type]:
            raise StepDefinitionError(f"{self.type.value} step has no {self.type.value} action")
        extra = [t.value for t, p in payloads.items() if t is not self.type and p]
        if extra:
            raise StepDefinitionError(
                f"{self.type.value} step also defines: {', '.join(extra)}"
            )
        if not self.shell:
            self.shell = DEFAULT_SHELL

    @classmethod
    def run_command(cls, command: str, shell: Optional[str] = None) -> "Step":
        return cls(type=StepType.RUN, run=command, shell=shell or DEFAULT_SHELL)

    @classmethod
    def copy_files(cls, local: str, remote: str, exclude: Optional[List[str]] = None) -> "Step":
        return cls(type=StepType.COPY, copy=CopyStep(local, remote, list(exclude or [])))

    @classmethod
    def docker_container(cls, docker: DockerStep, shell: Optional[str] = None) -> "Step":
        return cls(type=StepType.DOCKER, docker=docker, shell=shell or DEFAULT_SHELL)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        if not isinstance(data, dict):
            raise StepDefinitionError(f"step must be a mapping, got {type(data).__name__}")
        present = [t for t in StepType if data.get(t.value)]
        if not present:
            raise StepDefinitionError("step must define one of: run, copy, docker")
        if len(present) > 1:
            names = ", ".join(t.value for t in present)
            raise StepDefinitionError(f"step defines more than one action: {names}")

        shell = str(data.get("shell") or DEFAULT_SHELL)
        kind = present[0]
        if kind is StepType.RUN:
            return cls(type=kind, run=str(data["run"]), shell=shell)
        if kind is StepType.COPY:
            return cls(type=kind, copy=CopyStep.from_dict(data["copy"]), shell=shell)
        return cls(type=kind, docker=DockerStep.from_dict(data["docker"]), shell=shell)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value, "shell": self.shell}
        if self.type is StepType.RUN:
            data["run"] = self.run
        elif self.type is StepType.COPY:
            data["copy"] = self.copy.to_dict()
        else:
            data["docker"] = self.docker.to_dict()
        return data

    def describe(self) -> str:
        """Short human-readable label"""
        if self.type is StepType.RUN:
            return f"run: {self.run}"
        if self.type is StepType.COPY:
            return f"copy: {self.copy.local} -> {self.copy.remote}"
        return f"docker: {self.docker.name}"


@dataclass
class Job:
    """Named, ordered sequence of steps"""
    name: str = ""
    steps: List[Step] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "steps": [s.to_dict() for s in self.steps]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        _require_mapping(data, "job")
        steps = data.get("steps") or []
        if not isinstance(steps, list):
            raise ConfigError("job steps must be a list")
        return cls(
            name=str(data.get("name") or ""),
            steps=[Step.from_dict(s) for s in steps],
        )


@dataclass
class Config:
    """Deployment document: where to deploy and what to run"""
    targets: List[Target] = field(default_factory=list)
    jobs: List[Job] = field(default_factory=list)

    def apply_defaults(self) -> None:
        """Name unnamed jobs job-N and unnamed targets after their host"""
        for i, job in enumerate(self.jobs):
            if not job.name:
                job.name = JOB_NAME_TEMPLATE.format(index=i + 1)
        for target in self.targets:
            if not target.name:
                target.name = target.host

    def validate(self) -> None:
        if not self.targets:
            raise ConfigError("at least one target is required")
        if not self.jobs:
            raise ConfigError("at least one job is required")
        for target in self.targets:
            target.validate()
        for job in self.jobs:
            if not job.steps:
                raise ConfigError(f"job '{job.name}': at least one step is required")
            for i, step in enumerate(job.steps, start=1):
                _validate_step(job.name, i, step)

    def find_job(self, name: str) -> Optional[Job]:
        for job in self.jobs:
            if job.name == name:
                return job
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "targets": [t.to_dict() for t in self.targets],
            "jobs": [j.to_dict() for j in self.jobs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        _require_mapping(data, "config")
        targets = data.get("targets") or []
        jobs = data.get("jobs") or []
        if not isinstance(targets, list) or not isinstance(jobs, list):
            raise ConfigError("targets and jobs must be lists")
        return cls(
            targets=[Target.from_dict(t) for t in targets],
            jobs=[Job.from_dict(j) for j in jobs],
        )


# ============================================================
# Parsing helpers
# ============================================================

def _validate_step(job_name: str, index: int, step: Step) -> None:
    where = f"job '{job_name}' step {index}"
    if step.type is StepType.COPY:
        if not step.copy.local or not step.copy.remote:
            raise ConfigError(f"{where}: copy requires local and remote")
    elif step.type is StepType.DOCKER:
        docker = step.docker
        if not docker.image or not docker.name:
            raise ConfigError(f"{where}: docker requires image and name")
        if docker.build is not None and not docker.build.context:
            raise ConfigError(f"{where}: docker build requires context")


def _require_mapping(data: Any, what: str) -> None:
    if not isinstance(data, dict):
        raise ConfigError(f"{what} must be a mapping, got {type(data).__name__}")


def _str_list(value: Any, what: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{what} must be a list")
    return [_scalar(v) for v in value]


def _str_map(value: Any, what: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{what} must be a mapping")
    return {str(k): _scalar(v) for k, v in value.items()}


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
