"""
Fluent configuration builder for programmatic use
"""
import json
from typing import List, Optional

from rich.console import Console

from ...core.exceptions import ConfigError
from ...core.logging import get_stdout_console
from ...domain.job.models import Config, DockerStep, Job, Step
from ...domain.target import Target


class ConfigBuilder:
    """
    Build a Config step by step.

    Steps are appended to the most recently added job.

    Example:
        config = (
            ConfigBuilder()
            .add_target(Target(host="10.0.0.5", user="deploy", private_key="~/.ssh/id_ed25519"))
            .add_job("web")
            .add_copy_step("./dist", "/srv/web", exclude=["*.map"])
            .add_run_step("systemctl reload nginx")
            .get_config()
        )
    """

    def __init__(self):
        self._config = Config()

    def add_target(self, target: Target) -> "ConfigBuilder":
        self._config.targets.append(target)
        return self

    def add_job(self, name: str = "") -> "ConfigBuilder":
        self._config.jobs.append(Job(name=name))
        return self

    def add_step(self, step: Step) -> "ConfigBuilder":
        if not self._config.jobs:
            raise ConfigError("no job defined: call add_job before adding steps")
        self._config.jobs[-1].steps.append(step)
        return self

    def add_run_step(self, command: str, shell: Optional[str] = None) -> "ConfigBuilder":
        return self.add_step(Step.run_command(command, shell))

    def add_copy_step(
        self, local: str, remote: str, exclude: Optional[List[str]] = None
    ) -> "ConfigBuilder":
        return self.add_step(Step.copy_files(local, remote, exclude))

    def add_docker_step(self, docker: DockerStep, shell: Optional[str] = None) -> "ConfigBuilder":
        return self.add_step(Step.docker_container(docker, shell))

    def get_config(self) -> Config:
        return self._config

    def to_json(self) -> str:
        return json.dumps(self._config.to_dict(), indent=2)

    def print(self, console: Optional[Console] = None) -> None:
        """Write the configuration as JSON to stdout"""
        console = console or get_stdout_console()
        console.print_json(self.to_json())
