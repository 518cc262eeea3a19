"""
Configuration adapters: config files, env files and vaults
"""
from .builder import ConfigBuilder
from .env import EnvLoader, build_environment
from .loader import ConfigLoader, substitute_env
from .vault import decrypt_vault, encrypt_vault

__all__ = [
    "ConfigBuilder",
    "ConfigLoader",
    "EnvLoader",
    "build_environment",
    "decrypt_vault",
    "encrypt_vault",
    "substitute_env",
]
