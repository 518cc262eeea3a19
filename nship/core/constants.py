"""
Project constants definitions
"""

# ============================================================
# SSH
# ============================================================

DEFAULT_SSH_PORT = 22
DEFAULT_DIAL_TIMEOUT = 5
DEFAULT_SHELL = "sh"

# ============================================================
# Step Hash Storage
# ============================================================

DEFAULT_HASH_DIR = ".nship/hashes"
HASH_FILE_NAME = "step_hashes.json"

# ============================================================
# Configuration
# ============================================================

DEFAULT_CONFIG_PATHS = ("nship.yaml", "nship.yml")
JOB_NAME_TEMPLATE = "job-{index}"

# ============================================================
# Environment / Vault
# ============================================================

VAULT_FILE_SUFFIX = ".vault"
VAULT_PASSWORD_ENV = "VAULT_PASSWORD"
VAULT_HEADER = "$ANSIBLE_VAULT"
VAULT_PBKDF2_ITERATIONS = 10000
