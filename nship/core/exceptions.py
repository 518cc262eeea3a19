"""
Unified exception definitions
"""
from typing import List, Optional


class NshipError(Exception):
    """Base exception class"""
    pass


class ConfigError(NshipError):
    """Configuration error"""
    pass


class StepDefinitionError(ConfigError):
    """A step does not carry exactly one action"""
    pass


class EnvLoadError(NshipError):
    """Environment file could not be loaded"""
    pass


class VaultError(NshipError):
    """Vault decryption error"""
    pass


class VaultPasswordRequiredError(VaultError):
    """Vault file given without a password"""

    def __init__(self, message: str = "vault password is required"):
        super().__init__(message)


class HashError(NshipError):
    """Step fingerprint could not be computed"""
    pass


class ConnectionError(NshipError):
    """Connection to a target failed"""

    def __init__(self, target: str, cause: object):
        self.target = target
        self.cause = cause
        super().__init__(f"connection to target {target} failed: {cause}")


class CommandError(NshipError):
    """Remote command exited with a non-zero status"""

    def __init__(self, command: str, cause: object, output: str = ""):
        self.command = command
        self.cause = cause
        self.output = output
        message = f"command '{command}' failed: {cause}"
        if output:
            message += f"\nOutput: {output}"
        super().__init__(message)


class CopyError(NshipError):
    """File copy error"""

    def __init__(self, source: str, destination: str, cause: object):
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(f"copying '{source}' to '{destination}' failed: {cause}")


class DockerError(NshipError):
    """Docker operation error"""

    def __init__(self, container_name: str, operation: str, cause: object):
        self.container_name = container_name
        self.operation = operation
        self.cause = cause
        super().__init__(
            f"Docker operation '{operation}' on container '{container_name}' failed: {cause}"
        )


class JobExecutionError(NshipError):
    """A step failed and aborted its job on one target"""

    def __init__(self, job_name: str, target_name: str, step_num: int, cause: object):
        self.job_name = job_name
        self.target_name = target_name
        self.step_num = step_num
        self.cause = cause
        super().__init__(
            f"job '{job_name}' failed on target '{target_name}': "
            f"step {step_num} failed: {cause}"
        )


class JobNotFoundError(NshipError):
    """Requested job is not defined"""

    def __init__(self, job_name: str):
        self.job_name = job_name
        super().__init__(f"job '{job_name}' not found")


class ExecutionFailedError(NshipError):
    """One or more (target, job) runs failed"""

    def __init__(self, errors: List[Exception], message: Optional[str] = None):
        self.errors = list(errors)
        if message is None:
            message = "; ".join(str(e) for e in self.errors)
        super().__init__(message)


class DeployError(NshipError):
    """A deployment stage failed"""

    def __init__(self, stage: str, cause: object):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")
