"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.job.models import Step
    from ..domain.target.models import Target


class HashStore(ABC):
    """Persistent step fingerprints keyed by (target, job, step index)"""

    @abstractmethod
    def save_hash(self, target_name: str, job_name: str, step_index: int, digest: str) -> None:
        """Store a fingerprint; must be durable when this returns"""
        pass

    @abstractmethod
    def get_hash(self, target_name: str, job_name: str, step_index: int) -> str:
        """Return the stored fingerprint, or "" when there is none"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all stored fingerprints"""
        pass


class StepClient(ABC):
    """One live connection to a target that can execute steps"""

    @abstractmethod
    def execute_step(self, step: "Step", step_num: int, total_steps: int) -> None:
        """Execute a single step (step_num is 1-based)"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the connection"""
        pass

    def __enter__(self) -> "StepClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class ClientFactory(ABC):
    """Step client factory interface"""

    @abstractmethod
    def new_client(self, target: "Target") -> StepClient:
        """Connect to target; raises ConnectionError on failure"""
        pass


class RemoteFileSystem(ABC):
    """The remote file operations a copy needs"""

    @abstractmethod
    def mkdir_all(self, path: str) -> None:
        """Create path and any missing parents"""
        pass

    @abstractmethod
    def create(self, path: str) -> BinaryIO:
        """Open path for writing, truncating it"""
        pass

    @abstractmethod
    def chmod(self, path: str, mode: int) -> None:
        pass

    @abstractmethod
    def stat(self, path: str):
        """Return an object with st_size and st_mode; FileNotFoundError when missing"""
        pass


class PromptProvider(ABC):
    """User prompt interface"""

    @abstractmethod
    def prompt(self, message: str, default: Optional[str] = None, password: bool = False) -> str:
        """Prompt user for input"""
        pass
