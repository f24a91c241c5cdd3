"""Encryption of user-authored text at rest.

Text is form-escaped, PKCS7 padded and encrypted with AES-128-CBC. Key and IV
are derived from the configured password and a random per-record salt with
PBKDF2-HMAC-SHA256, which keeps rows written by the legacy OpenSSL-based
implementation readable. Ciphertext and salt are both stored base64 encoded.
"""

import base64
import binascii
import os
from typing import Optional, Tuple
from urllib.parse import quote_plus, unquote_plus

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from gmethod.config import settings
from gmethod.logging_config import get_logger

logger = get_logger("encryption_service")

KEY_LENGTH = 16
IV_LENGTH = 16
SALT_LENGTH = 8
BLOCK_SIZE_BITS = 128


class DecryptionError(Exception):
    pass


def _derive_key_iv(salt: bytes) -> Tuple[bytes, bytes]:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH + IV_LENGTH,
        salt=salt,
        iterations=settings.encryption_iterations,
    )
    key_iv = kdf.derive(settings.encryption_password.encode("utf-8"))
    return key_iv[:KEY_LENGTH], key_iv[KEY_LENGTH:]


def encrypt(plain_text: str) -> Tuple[str, str]:
    """Encrypt text. Returns (base64 ciphertext, base64 salt)."""
    salt = os.urandom(SALT_LENGTH)
    key, iv = _derive_key_iv(salt)

    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(quote_plus(plain_text).encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    encrypted = encryptor.update(padded) + encryptor.finalize()

    return base64.b64encode(encrypted).decode("ascii"), base64.b64encode(salt).decode("ascii")


def decrypt(encrypted_text: str, salt: str) -> str:
    """Decrypt text produced by `encrypt`. Raises DecryptionError on malformed input."""
    try:
        encrypted = base64.b64decode(encrypted_text, validate=True)
        raw_salt = base64.b64decode(salt, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecryptionError(f"Invalid base64 payload: {e}") from e

    key, iv = _derive_key_iv(raw_salt)
    try:
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(encrypted) + decryptor.finalize()
        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        decrypted = unpadder.update(padded) + unpadder.finalize()
        text = decrypted.decode("utf-8")
    except ValueError as e:
        raise DecryptionError(f"Cannot decrypt payload: {e}") from e

    return unquote_plus(text)


def safe_decrypt(encrypted_text: Optional[str], salt: Optional[str]) -> str:
    """Decrypt stored text, falling back to the stored value on any failure."""
    if not encrypted_text:
        return ""
    if not salt:
        return encrypted_text
    try:
        return decrypt(encrypted_text, salt)
    except DecryptionError as e:
        logger.warning(f"Decryption failed, returning stored text: {e}")
        return encrypted_text
