"""
Deployment configuration loader

Supported formats, chosen by file extension: YAML, JSON, TOML and
JavaScript modules (evaluated with node). ``${VAR}`` references are
replaced from an explicit environment snapshot before parsing.
"""
import json
import re
import subprocess
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

import yaml

from ...core.exceptions import ConfigError
from ...core.logging import get_logger
from ...domain.job.models import Config

logger = get_logger(__name__)

ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)\}")

_NODE_SCRIPT = (
    "(async ()=>{"
    "const m=await import(\"./{name}\");"
    "console.log(JSON.stringify("
    "typeof m.default==='function'?await m.default():m.default));"
    "})();"
)


def substitute_env(content: str, env: Mapping[str, str]) -> str:
    """Replace ${VAR} with env[VAR]; unknown variables become empty"""
    return ENV_VAR_PATTERN.sub(lambda m: env.get(m.group(1), ""), content)


class ConfigLoader:
    """Load and validate a deployment configuration file"""

    def __init__(self, node_binary: str = "node"):
        self.node_binary = node_binary
        self._parsers: Dict[str, Callable[[Path, Mapping[str, str]], Any]] = {
            ".yaml": self._load_yaml,
            ".yml": self._load_yaml,
            ".json": self._load_json,
            ".toml": self._load_toml,
            ".js": self._load_javascript,
            ".mjs": self._load_javascript,
        }

    def load(self, path: Union[str, Path], env: Optional[Mapping[str, str]] = None) -> Config:
        """
        Load a configuration file.

        Args:
            path: Configuration file
            env: Variables available to ${VAR} substitution

        Returns:
            Validated Config with defaults applied

        Raises:
            ConfigError: If the file is missing, unparsable or invalid
        """
        path = Path(path)
        env = env if env is not None else {}

        parser = self._parsers.get(path.suffix.lower())
        if parser is None:
            raise ConfigError(f"unsupported config file extension: {path.suffix or path.name}")
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        logger.debug(f"Loading configuration from {path}")
        data = parser(path, env)
        if data is None:
            raise ConfigError(f"configuration file {path} is empty")

        config = Config.from_dict(data)
        config.apply_defaults()
        config.validate()
        return config

    def _read(self, path: Path, env: Mapping[str, str]) -> str:
        try:
            return substitute_env(path.read_text(encoding="utf-8"), env)
        except OSError as e:
            raise ConfigError(f"failed to read config file: {e}") from e

    def _load_yaml(self, path: Path, env: Mapping[str, str]) -> Any:
        try:
            return yaml.safe_load(self._read(path, env))
        except yaml.YAMLError as e:
            raise ConfigError(f"failed to parse YAML config: {e}") from e

    def _load_json(self, path: Path, env: Mapping[str, str]) -> Any:
        try:
            return json.loads(self._read(path, env))
        except ValueError as e:
            raise ConfigError(f"failed to parse JSON config: {e}") from e

    def _load_toml(self, path: Path, env: Mapping[str, str]) -> Any:
        try:
            return tomllib.loads(self._read(path, env))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"failed to parse TOML config: {e}") from e

    def _load_javascript(self, path: Path, env: Mapping[str, str]) -> Any:
        """Import the module with node and read the JSON it prints last"""
        script = _NODE_SCRIPT.replace("{name}", path.name)
        try:
            result = subprocess.run(
                [self.node_binary, "-e", script],
                cwd=path.parent.resolve(),
                env=dict(env) or None,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ConfigError(f"node is required to load {path}: {e}") from e

        if result.stderr:
            logger.debug(result.stderr.rstrip())
        if result.returncode != 0:
            raise ConfigError(
                f"failed to evaluate {path} (exit code {result.returncode})\n{result.stderr}"
            )

        lines = [line for line in result.stdout.splitlines() if line.strip()]
        if not lines:
            raise ConfigError("invalid config command output")
        try:
            return json.loads(lines[-1])
        except ValueError as e:
            raise ConfigError(f"failed to parse config output: {e}") from e
