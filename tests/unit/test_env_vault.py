"""
Unit tests for env files and Ansible Vault decryption.
"""
import os
from unittest.mock import MagicMock

import pytest

from nship.adapters.config import EnvLoader, build_environment, decrypt_vault, encrypt_vault
from nship.core.exceptions import EnvLoadError, VaultError, VaultPasswordRequiredError

SECRETS = "DB_PASSWORD=hunter2\nAPI_TOKEN='abc def'\n"


class TestVault:
    """Ansible Vault format."""

    def test_roundtrip(self):
        assert decrypt_vault(encrypt_vault(SECRETS, "pw"), "pw") == SECRETS

    def test_header_and_line_width(self):
        lines = encrypt_vault(SECRETS, "pw").splitlines()
        assert lines[0] == "$ANSIBLE_VAULT;1.1;AES256"
        assert all(len(line) <= 80 for line in lines[1:])

    def test_version_1_2_with_label(self):
        document = encrypt_vault(SECRETS, "pw").replace(
            "$ANSIBLE_VAULT;1.1;AES256", "$ANSIBLE_VAULT;1.2;AES256;prod", 1
        )
        assert decrypt_vault(document, "pw") == SECRETS

    def test_wrong_password(self):
        with pytest.raises(VaultError, match="invalid password"):
            decrypt_vault(encrypt_vault(SECRETS, "pw"), "wrong")

    def test_empty_password(self):
        with pytest.raises(VaultPasswordRequiredError, match="vault password is required"):
            decrypt_vault(encrypt_vault(SECRETS, "pw"), "")

    def test_bad_header(self):
        with pytest.raises(VaultError, match="header"):
            decrypt_vault("NOT_A_VAULT\n0000", "pw")

    def test_corrupt_payload(self):
        with pytest.raises(VaultError, match="malformed"):
            decrypt_vault("$ANSIBLE_VAULT;1.1;AES256\nzz", "pw")


class TestEnvLoader:
    """dotenv and vault files."""

    def test_plain_file(self, tmp_path):
        path = tmp_path / ".env"
        path.write_text("HOST=10.0.0.5\n# comment\nEMPTY=\nQUOTED=\"a b\"\nREF=${HOST}\n")
        values = EnvLoader().load(path)
        assert values == {"HOST": "10.0.0.5", "EMPTY": "", "QUOTED": "a b", "REF": "${HOST}"}

    def test_does_not_touch_process_environment(self, tmp_path, monkeypatch):
        monkeypatch.delenv("NSHIP_TEST_ONLY", raising=False)
        path = tmp_path / ".env"
        path.write_text("NSHIP_TEST_ONLY=1\n")
        EnvLoader().load(path)
        assert "NSHIP_TEST_ONLY" not in os.environ

    def test_missing_file(self, tmp_path):
        with pytest.raises(EnvLoadError):
            EnvLoader().load(tmp_path / "missing.env")

    def test_vault_with_explicit_password(self, tmp_path):
        path = tmp_path / "secrets.vault"
        path.write_text(encrypt_vault(SECRETS, "pw"))
        values = EnvLoader().load(path, "pw")
        assert values == {"DB_PASSWORD": "hunter2", "API_TOKEN": "abc def"}

    def test_vault_password_from_snapshot(self, tmp_path):
        path = tmp_path / "secrets.vault"
        path.write_text(encrypt_vault(SECRETS, "pw"))
        values = EnvLoader().load(path, env={"VAULT_PASSWORD": "pw"})
        assert values["DB_PASSWORD"] == "hunter2"

    def test_vault_password_from_prompt(self, tmp_path):
        path = tmp_path / "secrets.vault"
        path.write_text(encrypt_vault(SECRETS, "pw"))
        prompt = MagicMock()
        prompt.prompt.return_value = "pw"
        values = EnvLoader(prompt_provider=prompt).load(path)
        assert values["DB_PASSWORD"] == "hunter2"
        prompt.prompt.assert_called_once_with("Enter vault password", password=True)

    def test_vault_without_password(self, tmp_path):
        path = tmp_path / "secrets.vault"
        path.write_text(encrypt_vault(SECRETS, "pw"))
        with pytest.raises(VaultPasswordRequiredError):
            EnvLoader().load(path)


class TestBuildEnvironment:
    """Merged environment snapshots."""

    def test_plain_files_do_not_override(self, tmp_path):
        first = tmp_path / "a.env"
        first.write_text("A=1\nB=1\n")
        second = tmp_path / "b.env"
        second.write_text("B=2\nD=2\n")
        env = build_environment([str(first), str(second)], base={"A": "0", "C": "0"})
        assert env == {"A": "0", "B": "1", "C": "0", "D": "2"}

    def test_set_variable_beats_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("HOST=dev\n")
        assert build_environment([str(env_file)], base={"HOST": "prod"})["HOST"] == "prod"

    def test_vault_values_override(self, tmp_path):
        vault = tmp_path / "secrets.vault"
        vault.write_text(encrypt_vault(SECRETS, "pw"))
        env = build_environment(
            [str(vault)], vault_password="pw", base={"DB_PASSWORD": "old", "KEEP": "1"}
        )
        assert env["DB_PASSWORD"] == "hunter2"
        assert env["KEEP"] == "1"

    def test_base_defaults_to_process_environment(self, monkeypatch):
        monkeypatch.setenv("NSHIP_BASE_VAR", "yes")
        assert build_environment()["NSHIP_BASE_VAR"] == "yes"

    def test_vault_password_from_earlier_file(self, tmp_path):
        plain = tmp_path / ".env"
        plain.write_text("VAULT_PASSWORD=pw\n")
        vault = tmp_path / "secrets.vault"
        vault.write_text(encrypt_vault(SECRETS, "pw"))
        env = build_environment([str(plain), str(vault)], base={})
        assert env["DB_PASSWORD"] == "hunter2"
