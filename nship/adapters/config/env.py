"""
Environment file loading

Files are parsed into a dictionary; the process environment is never
modified. The merged result is the snapshot used for ${VAR} substitution.
"""
import io
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Union

from dotenv import dotenv_values

from ...core.constants import VAULT_FILE_SUFFIX, VAULT_PASSWORD_ENV
from ...core.exceptions import EnvLoadError, VaultPasswordRequiredError
from ...core.interfaces import PromptProvider
from ...core.logging import get_logger
from .vault import decrypt_vault

logger = get_logger(__name__)


class EnvLoader:
    """Read dotenv files and Ansible Vault encrypted dotenv files"""

    def __init__(self, prompt_provider: Optional[PromptProvider] = None):
        """
        Args:
            prompt_provider: Asked for the vault password when none is given
        """
        self.prompt_provider = prompt_provider

    def load(
        self,
        path: Union[str, Path],
        vault_password: str = "",
        env: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, str]:
        """
        Load variables from an env file.

        Args:
            path: .env file, or a file ending in .vault
            vault_password: Password for .vault files
            env: Snapshot consulted for VAULT_PASSWORD

        Raises:
            EnvLoadError: If the file cannot be read or parsed
            VaultPasswordRequiredError: If a vault file has no password
            VaultError: If decryption fails
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise EnvLoadError(f"failed to read env file {path}: {e}") from e

        if path.name.endswith(VAULT_FILE_SUFFIX):
            password = self.resolve_vault_password(vault_password, env or {})
            content = decrypt_vault(content, password)

        values = dotenv_values(stream=io.StringIO(content), interpolate=False)
        logger.debug(f"Loaded {len(values)} variables from {path}")
        return {key: value or "" for key, value in values.items()}

    def resolve_vault_password(self, vault_password: str, env: Mapping[str, str]) -> str:
        """Explicit password, then VAULT_PASSWORD, then the prompt"""
        if vault_password:
            return vault_password
        if env.get(VAULT_PASSWORD_ENV):
            return env[VAULT_PASSWORD_ENV]
        if self.prompt_provider is not None:
            password = self.prompt_provider.prompt("Enter vault password", password=True)
            if password:
                return password
        raise VaultPasswordRequiredError()


def build_environment(
    env_paths: Sequence[Union[str, Path]] = (),
    vault_password: str = "",
    base: Optional[Mapping[str, str]] = None,
    loader: Optional[EnvLoader] = None,
) -> Dict[str, str]:
    """
    Merge a base environment with env files.

    Plain files only add variables that are not set yet, so the base and
    earlier files win. Values from .vault files override.

    Args:
        env_paths: Files to load, in order
        vault_password: Password for any .vault file
        base: Starting variables (default: a copy of os.environ)
        loader: EnvLoader to use
    """
    loader = loader or EnvLoader()
    snapshot = dict(os.environ if base is None else base)
    for path in env_paths:
        if not str(path):
            continue
        values = loader.load(path, vault_password, snapshot)
        if Path(path).name.endswith(VAULT_FILE_SUFFIX):
            snapshot.update(values)
        else:
            for key, value in values.items():
                snapshot.setdefault(key, value)
    return snapshot
