"""
Step fingerprint storage implementations
"""
import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from ...core.constants import DEFAULT_HASH_DIR, HASH_FILE_NAME
from ...core.exceptions import HashError
from ...core.interfaces import HashStore
from ...core.logging import get_logger

logger = get_logger(__name__)


HashKey = Tuple[str, str, int]


def hash_key(target_name: str, job_name: str, step_index: int) -> HashKey:
    return (target_name, job_name, step_index)


class _RWLock:
    """Many readers or one writer"""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self):
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class FileHashStore(HashStore):
    """
    JSON file backed fingerprint storage.

    The file holds a list of ``{"target", "job", "step", "hash"}`` records.
    It is read once on first use and rewritten in full on every save.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize file hash store.

        Args:
            path: Backing file (default .nship/hashes/step_hashes.json)
        """
        if path is None:
            path = Path(DEFAULT_HASH_DIR) / HASH_FILE_NAME
        self.path = Path(path).expanduser()
        self._hashes: Dict[HashKey, Dict] = {}
        self._loaded = False
        self._lock = _RWLock()

    def save_hash(self, target_name: str, job_name: str, step_index: int, digest: str) -> None:
        with self._lock.write():
            self._ensure_loaded()
            self._hashes[hash_key(target_name, job_name, step_index)] = {
                "target": target_name,
                "job": job_name,
                "step": step_index,
                "hash": digest,
            }
            self._write()

    def get_hash(self, target_name: str, job_name: str, step_index: int) -> str:
        with self._lock.read():
            loaded = self._loaded
        if not loaded:
            with self._lock.write():
                self._ensure_loaded()
        with self._lock.read():
            record = self._hashes.get(hash_key(target_name, job_name, step_index))
            return record["hash"] if record else ""

    def clear(self) -> None:
        with self._lock.write():
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                raise HashError(f"failed to remove {self.path}: {e}") from e
            self._hashes = {}
            self._loaded = True

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._hashes = self._read()
        self._loaded = True

    def _read(self) -> Dict[HashKey, Dict]:
        if not self.path.exists():
            return {}
        try:
            records = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise HashError(f"failed to read hash file {self.path}: {e}") from e
        if not isinstance(records, list):
            raise HashError(f"hash file {self.path} must contain a list")

        hashes: Dict[HashKey, Dict] = {}
        for record in records:
            try:
                key = hash_key(record["target"], record["job"], int(record["step"]))
            except (KeyError, TypeError, ValueError) as e:
                raise HashError(f"malformed record in {self.path}: {record!r}") from e
            hashes[key] = record
        logger.debug(f"Loaded {len(hashes)} step hashes from {self.path}")
        return hashes

    def _write(self) -> None:
        records = list(self._hashes.values())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                os.unlink(tmp)
                raise
        except OSError as e:
            raise HashError(f"failed to write hash file {self.path}: {e}") from e


class MemoryHashStore(HashStore):
    """In-process fingerprint storage"""

    def __init__(self):
        self._hashes: Dict[HashKey, str] = {}
        self._lock = threading.Lock()

    def save_hash(self, target_name: str, job_name: str, step_index: int, digest: str) -> None:
        with self._lock:
            self._hashes[hash_key(target_name, job_name, step_index)] = digest

    def get_hash(self, target_name: str, job_name: str, step_index: int) -> str:
        with self._lock:
            return self._hashes.get(hash_key(target_name, job_name, step_index), "")

    def clear(self) -> None:
        with self._lock:
            self._hashes.clear()
