"""
Job execution service - business logic
"""
from typing import Callable, List, Optional, Sequence

from ...core.exceptions import ExecutionFailedError, JobExecutionError, NshipError
from ...core.interfaces import ClientFactory, HashStore
from ...core.logging import get_logger
from ..target import Target
from .hasher import StepHasher
from .models import Job, Step

logger = get_logger(__name__)


class JobService:
    """
    Run jobs on targets, skipping steps whose fingerprint is unchanged.

    Targets are visited in order and, for each target, jobs in order. Every
    (target, job) pair gets its own client, closed when the job ends. Once a
    step executes, every later step of the same job executes as well.
    No dependency on CLI or configuration files.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        hash_store: Optional[HashStore] = None,
        skip_unchanged: bool = True,
        hasher: Optional[StepHasher] = None,
        on_job_start: Optional[Callable[[str, str], None]] = None,
        on_step_skip: Optional[Callable[[str, str, int], None]] = None,
        on_job_done: Optional[Callable[[str, str], None]] = None,
    ):
        """
        Initialize job service.

        Args:
            client_factory: Opens one client per (target, job)
            hash_store: Fingerprint storage; without it every step runs
            skip_unchanged: Skip steps whose fingerprint matches the stored one
            hasher: Step fingerprinting (default StepHasher)
            on_job_start: Callback before a job starts (target_name, job_name)
            on_step_skip: Callback when a step is skipped (target_name, job_name, step_num)
            on_job_done: Callback after a job succeeds (target_name, job_name)
        """
        self.client_factory = client_factory
        self.hash_store = hash_store
        self.skip_unchanged = skip_unchanged
        self.hasher = hasher or StepHasher()
        self.on_job_start = on_job_start
        self.on_step_skip = on_step_skip
        self.on_job_done = on_job_done

    def execute_jobs(
        self,
        targets: Sequence[Target],
        jobs: Sequence[Job],
        continue_on_error: bool = False,
    ) -> None:
        """
        Execute every job on every target.

        Stops at the first failure unless continue_on_error is set, in which
        case the remaining (target, job) pairs still run and all failures are
        raised together at the end.

        Raises:
            NshipError: First failure (ConnectionError, JobExecutionError, ...)
            ExecutionFailedError: With continue_on_error, when anything failed
        """
        errors: List[NshipError] = []
        for target in targets:
            for job in jobs:
                try:
                    self.execute_job(target, job)
                except NshipError as e:
                    if not continue_on_error:
                        raise
                    logger.error(str(e))
                    errors.append(e)
        if errors:
            raise ExecutionFailedError(errors)

    def execute_job(self, target: Target, job: Job) -> None:
        """
        Execute one job on one target.

        Raises:
            ConnectionError: If the target cannot be reached
            JobExecutionError: If a step fails; later steps are not run
        """
        target_name = target.get_name()
        if self.on_job_start:
            self.on_job_start(target_name, job.name)

        with self.client_factory.new_client(target) as client:
            force_execute = False
            total = len(job.steps)
            for index, step in enumerate(job.steps):
                step_num = index + 1
                if not self.should_execute_step(target, job, index, step, force_execute):
                    logger.debug(f"[{target_name}] Skipping step {step_num} in job '{job.name}' (unchanged)")
                    if self.on_step_skip:
                        self.on_step_skip(target_name, job.name, step_num)
                    continue

                try:
                    client.execute_step(step, step_num, total)
                except Exception as e:
                    raise JobExecutionError(job.name, target_name, step_num, e) from e

                force_execute = True
                self._store_step_hash(target, job, index, step)

        if self.on_job_done:
            self.on_job_done(target_name, job.name)

    def should_execute_step(
        self,
        target: Target,
        job: Job,
        step_index: int,
        step: Step,
        force_execute: bool,
    ) -> bool:
        """
        Decide whether a step has to run.

        A step runs when forced, when skipping is disabled or impossible, when
        nothing is stored for it, or when its fingerprint changed. A failure
        to compute or read a fingerprint also makes it run.
        """
        if force_execute or not self.skip_unchanged or self.hash_store is None:
            return True

        try:
            current = self.hasher.compute_hash(step, target)
            stored = self.hash_store.get_hash(target.get_name(), job.name, step_index)
        except Exception as e:
            logger.warning(f"Could not check step {step_index + 1} of job '{job.name}', running it: {e}")
            return True

        return stored == "" or stored != current

    def clear_hashes(self) -> None:
        """Forget every stored fingerprint"""
        if self.hash_store is None:
            return
        self.hash_store.clear()

    def _store_step_hash(self, target: Target, job: Job, step_index: int, step: Step) -> None:
        if self.hash_store is None:
            return
        try:
            digest = self.hasher.compute_hash(step, target)
            self.hash_store.save_hash(target.get_name(), job.name, step_index, digest)
        except Exception as e:
            logger.warning(f"Failed to save hash for step {step_index + 1} of job '{job.name}': {e}")
