"""
Main CLI application
"""
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ... import __version__
from ...core.constants import DEFAULT_CONFIG_PATHS
from ...core.exceptions import NshipError
from ...core.logging import get_logger, get_stderr_console, get_stdout_console, setup_logging
from ...domain.job import JobService
from ...infrastructure.state import FileHashStore
from ..config.env import EnvLoader
from ..ssh import SSHClientFactory
from .deploy import DeployApp
from .prompts import RichPromptProvider

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()

app = typer.Typer(
    name="nship",
    add_completion=False,
    help="Deploy to remote hosts over SSH, skipping unchanged steps",
    rich_markup_mode="rich",
)


def default_config_path() -> str:
    """First existing default config file, else the first candidate"""
    for candidate in DEFAULT_CONFIG_PATHS:
        if Path(candidate).exists():
            return candidate
    return DEFAULT_CONFIG_PATHS[0]


def split_env_paths(values: Optional[List[str]]) -> List[str]:
    """Flatten repeated and comma-separated --env-file values"""
    paths: List[str] = []
    for value in values or []:
        paths.extend(p.strip() for p in value.split(",") if p.strip())
    return paths


def _version_callback(value: bool) -> None:
    if value:
        stdout_console.print(f"nship version {__version__}", markup=False, highlight=False)
        raise typer.Exit()


def build_service(no_skip: bool = False) -> JobService:
    """JobService wired to SSH, the default hash file and console progress"""
    return JobService(
        client_factory=SSHClientFactory(console=stdout_console),
        hash_store=FileHashStore(),
        skip_unchanged=not no_skip,
        on_job_start=lambda target, job: stdout_console.print(
            f"[cyan]▶[/cyan] Running job [bold]{escape(job)}[/bold] on [cyan]{escape(target)}[/cyan]"
        ),
        on_step_skip=lambda target, job, step_num: stdout_console.print(
            f"[yellow]⊘[/yellow] [{escape(target)}] Skipping step {step_num} in job '{escape(job)}' (unchanged)"
        ),
        on_job_done=lambda target, job: stdout_console.print(
            f"[green]✓[/green] Job [bold]{escape(job)}[/bold] completed on [cyan]{escape(target)}[/cyan]"
        ),
    )


@app.command()
def deploy(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-config",
        help="Configuration file (default: nship.yaml or nship.yml)",
    ),
    job: str = typer.Option(
        "",
        "--job",
        "-job",
        help="Run only this job",
    ),
    env_file: Optional[List[str]] = typer.Option(
        None,
        "--env-file",
        "-env-file",
        help="Env file(s) to load; repeatable or comma-separated, .vault files are decrypted",
    ),
    vault_password: str = typer.Option(
        "",
        "--vault-password",
        "-vault-password",
        help="Password for .vault env files (default: $VAULT_PASSWORD or prompt)",
    ),
    no_skip: bool = typer.Option(
        False,
        "--no-skip",
        "-no-skip",
        help="Run every step even if unchanged",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-version",
        callback=_version_callback,
        is_eager=True,
        help="Print version and exit",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
):
    """
    Run deployment jobs on every configured target

    Examples:
        nship
        nship -config deploy.yaml -job web
        nship -env-file .env,secrets.vault -vault-password s3cret
        nship -no-skip
    """
    setup_logging(level=log_level, log_file=log_file)

    deploy_app = DeployApp(
        job_service=build_service(no_skip),
        env_loader=EnvLoader(prompt_provider=RichPromptProvider()),
    )
    try:
        deploy_app.run(
            config_path=config or default_config_path(),
            job_name=job,
            env_paths=split_env_paths(env_file),
            vault_password=vault_password,
        )
    except NshipError as e:
        stderr_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Deployment failed")
        stderr_console.print(f"[red]Error:[/red] Deployment failed: {escape(str(e))}")
        raise typer.Exit(1)

    stdout_console.print("[green]✓[/green] All jobs completed successfully")


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
