# --------------------------------------------------------------
# File: crypto_kdf.py
# Description: Derivación de claves simétricas a partir de contraseñas (PBKDF2).
# --------------------------------------------------------------
"""Funciones de derivación de claves para proteger archivos del usuario."""

from __future__ import annotations

from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from core.errors import CryptoBackendError, WeakInputError

# Forman parte del formato del contenedor: cambiarlos rompe la compatibilidad.
ITERATIONS = 100_000
KEY_LENGTH = 32
SALT_LENGTH = 16


def _password_bytes(password: Union[str, bytes]) -> bytes:
    """Normaliza la contraseña a bytes UTF-8 sin alterar mayúsculas ni espacios."""

    if isinstance(password, str):
        return password.encode("utf-8")
    if isinstance(password, (bytes, bytearray, memoryview)):
        return bytes(password)
    raise WeakInputError("La contraseña debe ser str o bytes.")


def derive_key(password: Union[str, bytes], salt: bytes) -> bytes:
    """Deriva una clave AES-256 usando PBKDF2-HMAC-SHA256.

    Args:
        password (Union[str, bytes]): Contraseña del usuario; no puede ser vacía.
        salt (bytes): Salt aleatoria de 16 bytes asociada al contenedor.

    Returns:
        bytes: Clave simétrica de 256 bits.

    Raises:
        WeakInputError: Si la contraseña es vacía o la salt no mide 16 bytes.
        CryptoBackendError: Si la primitiva PBKDF2 no está disponible o falla.

    """

    secret = _password_bytes(password)
    if not secret:
        raise WeakInputError("La contraseña no puede estar vacía.")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_LENGTH:
        raise WeakInputError(f"La salt debe medir {SALT_LENGTH} bytes.")

    try:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=bytes(salt),
            iterations=ITERATIONS,
        )
        return kdf.derive(secret)
    except (UnsupportedAlgorithm, ValueError, TypeError) as exc:
        raise CryptoBackendError("Fallo en la derivación PBKDF2.") from exc
