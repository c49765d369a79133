# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Primitivas AES-GCM y fuente de aleatoriedad para el motor.
# --------------------------------------------------------------
"""Rutinas de cifrado simétrico autenticado y proveedores inyectables."""

import os
from typing import Callable, Optional, Protocol

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_LENGTH = 12
TAG_LENGTH = 16

RandomSource = Callable[[int], bytes]


def secure_random(length: int) -> bytes:
    """Devuelve `length` bytes de la fuente segura del sistema operativo."""

    return os.urandom(length)


def aes_gcm_encrypt_with_key(
    key: bytes, nonce: bytes, plaintext: bytes, aad: Optional[bytes] = None
) -> bytes:
    """Cifra datos con AES-GCM utilizando una clave y nonce proporcionados.

    Args:
        key (bytes): Clave simétrica de 256 bits.
        nonce (bytes): Vector de inicialización de 96 bits, único por cifrado.
        plaintext (bytes): Datos a cifrar; pueden ser vacíos.
        aad (Optional[bytes]): Datos autenticados adicionales.

    Returns:
        bytes: Ciphertext con la etiqueta de 128 bits concatenada al final.

    """

    return AESGCM(key).encrypt(nonce, plaintext, aad)


def aes_gcm_decrypt_with_key(
    key: bytes, nonce: bytes, ciphertext: bytes, aad: Optional[bytes] = None
) -> bytes:
    """Descifra y verifica datos con AES-GCM.

    Args:
        key (bytes): Clave simétrica que protege los datos.
        nonce (bytes): Vector de inicialización de 96 bits.
        ciphertext (bytes): Datos cifrados con la etiqueta al final.
        aad (Optional[bytes]): Datos autenticados adicionales.

    Returns:
        bytes: Mensaje original en claro.

    Raises:
        cryptography.exceptions.InvalidTag: Si la etiqueta no verifica.

    """

    return AESGCM(key).decrypt(nonce, ciphertext, aad)


class Aead(Protocol):
    """Proveedor AEAD; `decrypt` lanza `InvalidTag` si la autenticación falla."""

    def encrypt(self, key: bytes, nonce: bytes, plaintext: bytes, aad: Optional[bytes]) -> bytes:
        ...

    def decrypt(self, key: bytes, nonce: bytes, ciphertext: bytes, aad: Optional[bytes]) -> bytes:
        ...


class AesGcmAead:
    """Implementación AES-256-GCM del proveedor AEAD."""

    tag_length = TAG_LENGTH

    def encrypt(self, key: bytes, nonce: bytes, plaintext: bytes, aad: Optional[bytes]) -> bytes:
        return aes_gcm_encrypt_with_key(key, nonce, plaintext, aad)

    def decrypt(self, key: bytes, nonce: bytes, ciphertext: bytes, aad: Optional[bytes]) -> bytes:
        return aes_gcm_decrypt_with_key(key, nonce, ciphertext, aad)
