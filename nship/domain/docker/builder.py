"""
Docker command builder

Turns a DockerStep into the ordered shell commands that (re)create and start
its container. Output is deterministic: build args and environment are
emitted in sorted key order.
"""
from typing import Dict, Iterable, List

from ...core.utils import quote_value
from ..job.models import DockerStep


def build_commands(docker: DockerStep) -> List[str]:
    """
    Build the command sequence for a Docker step.

    Order: optional image build, removal of any previous container, network
    creation, container creation, network attachment, start.
    """
    commands: List[str] = []

    if docker.build is not None:
        commands.append(build_image_command(docker))

    commands.append(f"docker rm -f {docker.name} 2>/dev/null || true")

    for network in docker.networks:
        commands.append(f"docker network create {network} 2>/dev/null || true")

    commands.append(create_container_command(docker))

    for network in docker.networks:
        commands.append(f"docker network connect {network} {docker.name}")

    commands.append(f"docker start {docker.name}")
    return commands


def build_image_command(docker: DockerStep) -> str:
    args = ["docker build", "-t", docker.image]
    for key in sorted(docker.build.args):
        args += ["--build-arg", f"{key}={docker.build.args[key]}"]
    args.append(docker.build.context)
    return " ".join(args)


def create_container_command(docker: DockerStep) -> str:
    args = ["docker create", "--name", docker.name]
    if docker.restart is not None:
        args += ["--restart", docker.restart.value]
    args += _quoted_pairs("-e", docker.environment, sort=True)
    args += _repeat("-p", docker.ports)
    args += _repeat("-v", docker.volumes)
    args += _quoted_pairs("-l", docker.labels, sort=False)
    args += _repeat("--network", docker.networks)
    args.append(docker.image)
    args += docker.command
    return " ".join(args)


def _repeat(flag: str, values: Iterable[str]) -> List[str]:
    args: List[str] = []
    for value in values:
        args += [flag, value]
    return args


def _quoted_pairs(flag: str, values: Dict[str, str], sort: bool) -> List[str]:
    keys = sorted(values) if sort else list(values)
    args: List[str] = []
    for key in keys:
        args += [flag, f"{key}={quote_value(values[key])}"]
    return args
