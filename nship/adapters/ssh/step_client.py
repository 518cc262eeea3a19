"""
Step execution over one SSH connection
"""
from typing import IO, Optional

from rich.console import Console

from ...core.client import RemoteClient
from ...core.exceptions import CommandError, CopyError, DockerError
from ...core.interfaces import RemoteFileSystem, StepClient
from ...core.logging import get_logger, get_stdout_console
from ...core.utils import shell_command
from ...domain.docker import build_commands
from ...domain.job.models import Step, StepType
from ...domain.sync import Copier

logger = get_logger(__name__)


class SSHStepClient(StepClient):
    """
    Execute steps on a connected target.

    Run steps become ``<shell> -c '<command>'``, copy steps go through the
    Copier over SFTP, and docker steps run their generated command list as
    one script.
    """

    def __init__(
        self,
        client: RemoteClient,
        fs: RemoteFileSystem,
        console: Optional[Console] = None,
        stdout: Optional[IO[str]] = None,
        stderr: Optional[IO[str]] = None,
    ):
        self.client = client
        self.fs = fs
        self.console = console or get_stdout_console()
        self.stdout = stdout
        self.stderr = stderr

    def execute_step(self, step: Step, step_num: int, total_steps: int) -> None:
        if step.type is StepType.RUN:
            self._progress(step_num, total_steps, f"Running command: {step.run}")
            self.run_script(step.shell, step.run)
        elif step.type is StepType.COPY:
            self._execute_copy(step, step_num, total_steps)
        elif step.type is StepType.DOCKER:
            self._execute_docker(step, step_num, total_steps)
        else:
            raise ValueError(f"unknown step type: {step.type}")

    def run_script(self, shell: str, script: str) -> str:
        """
        Run a script through `shell -c`, streaming its output.

        Raises:
            CommandError: If the remote process exits non-zero
        """
        full_cmd = shell_command(shell, script)
        logger.debug(f"[exec] {full_cmd}")
        exit_code, output = self.client.exec_streaming(full_cmd, self.stdout, self.stderr)
        if exit_code != 0:
            raise CommandError(
                full_cmd,
                Exception(f"Process exited with status {exit_code}"),
                output,
            )
        return output

    def close(self) -> None:
        self.client.close()

    def _execute_copy(self, step: Step, step_num: int, total_steps: int) -> None:
        copy = step.copy
        self._progress(step_num, total_steps, f"Copying {copy.local} to {copy.remote}")
        try:
            Copier(self.fs).copy_path(copy.local, copy.remote, copy.exclude)
        except Exception as e:
            raise CopyError(copy.local, copy.remote, e) from e

    def _execute_docker(self, step: Step, step_num: int, total_steps: int) -> None:
        docker = step.docker
        self._progress(step_num, total_steps, f"Running Docker container '{docker.name}'")
        script = "\n".join(build_commands(docker))
        try:
            self.run_script(step.shell, script)
        except Exception as e:
            raise DockerError(docker.name, "create/start", e) from e

    def _progress(self, step_num: int, total_steps: int, message: str) -> None:
        self.console.print(f"[{step_num}/{total_steps}] {message}", markup=False, highlight=False)
