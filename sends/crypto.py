"""
Symmetric encryption for sends headers.

Header values are Fernet tokens. The Fernet key is derived from
SENDS['ENCRYPTION_KEY'] (falling back to SECRET_KEY) with PBKDF2, so every
process sharing the secret can read headers written by the others.
"""

import base64
import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from . import conf
from .exceptions import DecryptionError

logger = logging.getLogger(__name__)

KEY_SALT = b'sends.crypto'
KEY_ITERATIONS = 100000


@lru_cache(maxsize=8)
def _fernet_for(secret: str) -> Fernet:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=KEY_SALT,
        iterations=KEY_ITERATIONS,
    )
    key = base64.urlsafe_b64encode(kdf.derive(secret.encode('utf-8')))
    return Fernet(key)


def get_cipher() -> Fernet:
    return _fernet_for(conf.get_encryption_secret())


def encrypt(value: str) -> str:
    return get_cipher().encrypt(value.encode('utf-8')).decode('ascii')


def decrypt(token: str) -> str:
    try:
        return get_cipher().decrypt(token.encode('utf-8')).decode('utf-8')
    except InvalidToken as exc:
        logger.error("Could not decrypt sends header value")
        raise DecryptionError("Header value is not a valid token for the configured encryption key") from exc
