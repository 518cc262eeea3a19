"""
Public programmatic API
"""
import os
from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from .adapters.cli.deploy import DeployApp, select_jobs
from .adapters.config.builder import ConfigBuilder
from .adapters.config.loader import ConfigLoader
from .adapters.ssh import SSHClientFactory
from .core.interfaces import ClientFactory, HashStore
from .domain.job import Config, JobService
from .infrastructure.state import FileHashStore


def new_builder() -> ConfigBuilder:
    return ConfigBuilder()


def new_file_hash_store(path: Optional[Union[str, Path]] = None) -> FileHashStore:
    return FileHashStore(path)


def load_config(
    config_path: Union[str, Path],
    env: Optional[Mapping[str, str]] = None,
) -> Config:
    """Load and validate a configuration file (env defaults to os.environ)"""
    return ConfigLoader().load(config_path, dict(os.environ) if env is None else env)


def run(
    config_path: Union[str, Path],
    job_name: str = "",
    env_paths: Sequence[str] = (),
    vault_password: str = "",
    skip_unchanged: bool = True,
    hash_store: Optional[HashStore] = None,
) -> None:
    """
    Load env files and a config file, then deploy.

    Args:
        config_path: Configuration file
        job_name: Run only this job when set
        env_paths: Env files loaded before the config
        vault_password: Password for .vault env files
        skip_unchanged: Skip steps whose fingerprint is unchanged
        hash_store: Fingerprint storage (default: the project hash file)

    Raises:
        DeployError: Naming the stage that failed
    """
    service = JobService(
        SSHClientFactory(),
        hash_store=hash_store or FileHashStore(),
        skip_unchanged=skip_unchanged,
    )
    DeployApp(service).run(config_path, job_name, env_paths, vault_password)


def run_config(
    config: Config,
    job_name: str = "",
    skip_unchanged: bool = False,
    hash_store: Optional[HashStore] = None,
    client_factory: Optional[ClientFactory] = None,
) -> None:
    """
    Deploy an in-memory configuration.

    Without a hash store every step runs.

    Raises:
        JobNotFoundError: If job_name is not defined
        NshipError: If a job fails
    """
    config.apply_defaults()
    config.validate()
    jobs = select_jobs(config, job_name)
    service = JobService(
        client_factory or SSHClientFactory(),
        hash_store=hash_store,
        skip_unchanged=skip_unchanged,
    )
    service.execute_jobs(config.targets, jobs)
