"""
Target domain model
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...core.constants import DEFAULT_SSH_PORT
from ...core.exceptions import ConfigError


@dataclass
class Target:
    """
    Deployment destination reachable over SSH.

    Attributes:
        host: Hostname or IP address
        user: SSH username
        name: Display name, falls back to host
        password: Password for authentication
        private_key: Path to a private key file, preferred over password
        port: SSH port, 0 means the default port
    """
    host: str
    user: str
    name: str = ""
    password: str = ""
    private_key: str = ""
    port: int = 0

    def get_name(self) -> str:
        return self.name or self.host

    def get_port(self) -> int:
        return self.port or DEFAULT_SSH_PORT

    def validate(self) -> None:
        """Validate connection settings"""
        label = self.get_name() or "<unnamed>"
        if not self.host:
            raise ConfigError(f"target '{label}': host is required")
        if not self.user:
            raise ConfigError(f"target '{label}': user is required")
        if not self.password and not self.private_key:
            raise ConfigError(f"target '{label}': password or private_key is required")
        if self.port and not (1 <= self.port <= 65535):
            raise ConfigError(f"target '{label}': invalid port {self.port}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "host": self.host,
            "user": self.user,
            "password": self.password,
            "private_key": self.private_key,
            "port": self.port,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Target":
        if not isinstance(data, dict):
            raise ConfigError(f"target must be a mapping, got {type(data).__name__}")
        port = data.get("port") or 0
        try:
            port = int(port)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid port: {data.get('port')!r}") from e
        return cls(
            host=_as_str(data.get("host")),
            user=_as_str(data.get("user")),
            name=_as_str(data.get("name")),
            password=_as_str(data.get("password")),
            private_key=_as_str(data.get("private_key")),
            port=port,
        )


def _as_str(value: Optional[Any]) -> str:
    return "" if value is None else str(value)
