"""
Ansible Vault (1.1 / 1.2, AES256) encryption and decryption
"""
import binascii
import os

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ...core.constants import VAULT_HEADER, VAULT_PBKDF2_ITERATIONS
from ...core.exceptions import VaultError, VaultPasswordRequiredError

SUPPORTED_VERSIONS = ("1.1", "1.2")
CIPHER_NAME = "AES256"
SALT_SIZE = 32
LINE_WIDTH = 80


def decrypt_vault(content: str, password: str) -> str:
    """
    Decrypt an Ansible Vault document.

    Raises:
        VaultPasswordRequiredError: If password is empty
        VaultError: If the document is malformed or the password is wrong
    """
    if not password:
        raise VaultPasswordRequiredError()

    salt, expected_hmac, ciphertext = _parse(content)
    cipher_key, hmac_key, iv = _derive_keys(password, salt)

    mac = hmac.HMAC(hmac_key, hashes.SHA256())
    mac.update(ciphertext)
    try:
        mac.verify(expected_hmac)
    except InvalidSignature as e:
        raise VaultError("vault decryption failed: invalid password or corrupted data") from e

    decryptor = Cipher(algorithms.AES(cipher_key), modes.CTR(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    try:
        plaintext = unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise VaultError("vault decryption failed: invalid padding") from e

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise VaultError(f"vault content is not valid UTF-8: {e}") from e


def encrypt_vault(plaintext: str, password: str) -> str:
    """Encrypt text into an Ansible Vault 1.1 document"""
    if not password:
        raise VaultPasswordRequiredError()

    salt = os.urandom(SALT_SIZE)
    cipher_key, hmac_key, iv = _derive_keys(password, salt)

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(cipher_key), modes.CTR(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    mac = hmac.HMAC(hmac_key, hashes.SHA256())
    mac.update(ciphertext)

    inner = b"\n".join(
        binascii.hexlify(part) for part in (salt, mac.finalize(), ciphertext)
    )
    body = binascii.hexlify(inner).decode("ascii")
    lines = [body[i:i + LINE_WIDTH] for i in range(0, len(body), LINE_WIDTH)]
    header = f"{VAULT_HEADER};1.1;{CIPHER_NAME}"
    return "\n".join([header] + lines) + "\n"


def _parse(content: str):
    lines = [line.strip() for line in content.strip().splitlines()]
    if not lines:
        raise VaultError("vault content is empty")

    header = lines[0].split(";")
    if len(header) < 3 or header[0] != VAULT_HEADER:
        raise VaultError("invalid vault header")
    if header[1] not in SUPPORTED_VERSIONS:
        raise VaultError(f"unsupported vault version: {header[1]}")
    if header[2] != CIPHER_NAME:
        raise VaultError(f"unsupported vault cipher: {header[2]}")

    try:
        inner = binascii.unhexlify("".join(lines[1:]))
        salt_hex, hmac_hex, ciphertext_hex = inner.split(b"\n", 2)
        return (
            binascii.unhexlify(salt_hex),
            binascii.unhexlify(hmac_hex),
            binascii.unhexlify(ciphertext_hex.strip()),
        )
    except (binascii.Error, ValueError) as e:
        raise VaultError(f"malformed vault payload: {e}") from e


def _derive_keys(password: str, salt: bytes):
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=80,
        salt=salt,
        iterations=VAULT_PBKDF2_ITERATIONS,
    )
    derived = kdf.derive(password.encode("utf-8"))
    return derived[:32], derived[32:64], derived[64:80]
