"""
Deployment application: environment, configuration, job selection, execution
"""
import os
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from ...core.exceptions import DeployError, JobNotFoundError, NshipError
from ...core.logging import get_logger
from ...domain.job import Config, Job, JobService
from ..config.env import EnvLoader, build_environment
from ..config.loader import ConfigLoader

logger = get_logger(__name__)


class DeployApp:
    """
    Glue between the command line and the job service.

    Each stage failure is raised as DeployError naming the stage, with the
    underlying error chained.
    """

    def __init__(
        self,
        job_service: JobService,
        env_loader: Optional[EnvLoader] = None,
        config_loader: Optional[ConfigLoader] = None,
        base_env: Optional[Mapping[str, str]] = None,
    ):
        self.job_service = job_service
        self.env_loader = env_loader or EnvLoader()
        self.config_loader = config_loader or ConfigLoader()
        self.base_env = base_env

    def run(
        self,
        config_path: Union[str, Path],
        job_name: str = "",
        env_paths: Sequence[str] = (),
        vault_password: str = "",
    ) -> None:
        try:
            env = build_environment(
                env_paths,
                vault_password,
                base=os.environ if self.base_env is None else self.base_env,
                loader=self.env_loader,
            )
        except NshipError as e:
            raise DeployError("environment loading", e) from e

        try:
            config = self.config_loader.load(config_path, env)
        except NshipError as e:
            raise DeployError("config loading", e) from e

        try:
            jobs = select_jobs(config, job_name)
        except JobNotFoundError as e:
            raise DeployError("job selection", e) from e

        logger.info(
            f"Running {len(jobs)} job(s) on {len(config.targets)} target(s) from {config_path}"
        )
        try:
            self.job_service.execute_jobs(config.targets, jobs)
        except NshipError as e:
            raise DeployError("job execution", e) from e


def select_jobs(config: Config, job_name: str = "") -> List[Job]:
    """All jobs, or only the named one"""
    if not job_name:
        return list(config.jobs)
    job = config.find_job(job_name)
    if job is None:
        raise JobNotFoundError(job_name)
    return [job]
