"""
Step fingerprinting

A fingerprint is SHA-256 over the canonical JSON of the step and its target.
Copy steps extend it with the observable state of the source tree
(modification time, size and mode of every non-excluded entry) so that a
changed source forces the step to run again.
"""
import hashlib
import json
import os
import stat
from typing import Any, Dict, List

from ...core.exceptions import HashError
from ..sync.exclude import is_excluded
from ..target import Target
from .models import Step, StepType


class StepHasher:
    """Compute deterministic fingerprints for (step, target) pairs"""

    def compute_hash(self, step: Step, target: Target) -> str:
        """
        Fingerprint a step as it would run on a target.

        Raises:
            HashError: If an existing source path cannot be read
        """
        digest = hashlib.sha256(self.canonical_bytes(step, target))

        if step.type is StepType.COPY:
            self._hash_source(digest, step.copy.local, step.copy.exclude)

        return digest.hexdigest()

    def canonical_bytes(self, step: Step, target: Target) -> bytes:
        payload: Dict[str, Any] = {"step": _canonical_step(step), "target": target.to_dict()}
        text = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
        return text.encode("ascii")

    def _hash_source(self, digest, local: str, exclude: List[str]) -> None:
        try:
            info = os.stat(local)
        except FileNotFoundError:
            return
        except OSError as e:
            raise HashError(f"failed to stat {local}: {e}") from e

        if stat.S_ISDIR(info.st_mode):
            self._hash_dir(digest, local, local, exclude)
        else:
            digest.update(b"%d|%d" % (info.st_mtime_ns, info.st_size))

    def _hash_dir(self, digest, root: str, directory: str, exclude: List[str]) -> None:
        try:
            names = sorted(os.listdir(directory))
        except OSError as e:
            raise HashError(f"failed to list {directory}: {e}") from e

        for name in names:
            path = os.path.join(directory, name)
            if is_excluded(path, name, exclude):
                continue
            try:
                info = os.stat(path)
            except OSError as e:
                raise HashError(f"failed to stat {path}: {e}") from e

            rel = os.path.relpath(path, root).replace(os.sep, "/")
            # entry names are hashed as raw file system bytes
            digest.update(os.fsencode(rel))
            digest.update(b"|%d|%d|%d\n" % (info.st_mtime_ns, info.st_size, info.st_mode))
            if stat.S_ISDIR(info.st_mode):
                self._hash_dir(digest, root, path, exclude)


def _canonical_step(step: Step) -> Dict[str, Any]:
    data = step.to_dict()
    if step.type is StepType.COPY:
        data["copy"]["exclude"] = sorted(data["copy"]["exclude"])
    return data
