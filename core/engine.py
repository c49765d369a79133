# --------------------------------------------------------------
# File: engine.py
# Description: Motor genérico de cifrado de archivos protegido por contraseña.
# --------------------------------------------------------------
"""Cifrado y descifrado de archivos completos con PBKDF2 + AES-256-GCM.

El motor no guarda estado entre llamadas: cada cifrado obtiene una salt y un
IV nuevos y la clave derivada solo vive dentro de la llamada.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from cryptography.exceptions import InvalidTag

from core import container
from core.crypto_kdf import SALT_LENGTH, derive_key
from core.crypto_sym import NONCE_LENGTH, Aead, AesGcmAead, RandomSource, secure_random
from core.errors import (
    CryptoBackendError,
    IncorrectPasswordError,
    ProtectionError,
    WeakInputError,
)
from core.models import DecryptResult, FileMetadata

__all__ = ["EncryptionEngine", "encrypt_bytes", "decrypt_bytes"]

logger = logging.getLogger(__name__)

Password = Union[str, bytes]
KeyDeriver = Callable[[Password, bytes], bytes]


def _require_password(password: Password) -> None:
    if not isinstance(password, (str, bytes, bytearray)):
        raise WeakInputError("La contraseña debe ser str o bytes.")
    if len(password) == 0:
        raise WeakInputError("La contraseña no puede estar vacía.")


class EncryptionEngine:
    """Orquesta salt/IV, derivación de clave, AEAD y codificación del contenedor.

    Args:
        random_bytes (RandomSource): Fuente segura de bytes aleatorios.
        derive (KeyDeriver): Función de derivación `(password, salt) -> key`.
        aead (Aead): Proveedor de cifrado autenticado.

    """

    def __init__(
        self,
        random_bytes: RandomSource = secure_random,
        derive: KeyDeriver = derive_key,
        aead: Optional[Aead] = None,
    ) -> None:
        self._random = random_bytes
        self._derive = derive
        self._aead = aead if aead is not None else AesGcmAead()

    def encrypt(
        self, data: bytes, password: Password, metadata: Optional[FileMetadata] = None
    ) -> bytes:
        """Cifra un buffer completo y devuelve los bytes del contenedor.

        Args:
            data (bytes): Contenido en claro; puede ser vacío.
            password (Password): Contraseña no vacía.
            metadata (Optional[FileMetadata]): Metadatos a embeber (variante `ENCM`).

        Returns:
            bytes: Contenedor `ENCF` o `ENCM`.

        Raises:
            WeakInputError: Si la contraseña o los datos no son válidos.
            CryptoBackendError: Si la primitiva criptográfica falla.

        """

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise WeakInputError("Los datos a cifrar deben ser bytes.")
        _require_password(password)

        salt = self._random(SALT_LENGTH)
        iv = self._random(NONCE_LENGTH)
        if len(salt) != SALT_LENGTH or len(iv) != NONCE_LENGTH:
            raise CryptoBackendError("La fuente aleatoria devolvió una longitud inesperada.")

        # El bloque de metadatos se autentica como AAD.
        block = container.encode_metadata(metadata) if metadata is not None else None
        key = self._derive(password, salt)
        try:
            ciphertext = self._aead.encrypt(key, iv, bytes(data), block)
        except ProtectionError:
            raise
        except Exception as exc:
            raise CryptoBackendError("Fallo en el cifrado AEAD.") from exc

        blob = container.encode(salt, iv, ciphertext, block)
        logger.debug(
            "Contenedor generado: %d bytes en claro -> %d bytes (metadatos=%s)",
            len(data),
            len(blob),
            block is not None,
        )
        return blob

    def decrypt(self, blob: bytes, password: Password) -> DecryptResult:
        """Verifica y descifra un contenedor.

        Args:
            blob (bytes): Bytes del contenedor.
            password (Password): Contraseña introducida por el usuario.

        Returns:
            DecryptResult: Contenido en claro y metadatos, si los hay.

        Raises:
            MalformedContainerError: Si el contenedor no respeta el formato.
            IncorrectPasswordError: Si la etiqueta AEAD no verifica.
            CryptoBackendError: Si la primitiva criptográfica falla.

        """

        _require_password(password)
        parts = container.decode(blob)

        key = self._derive(password, parts.salt)
        try:
            plaintext = self._aead.decrypt(key, parts.iv, parts.ciphertext, parts.metadata)
        except InvalidTag as exc:
            # Contraseña errónea y manipulación son indistinguibles a propósito.
            raise IncorrectPasswordError("La verificación AEAD ha fallado.") from exc
        except ProtectionError:
            raise
        except Exception as exc:
            raise CryptoBackendError("Fallo en el descifrado AEAD.") from exc

        # Los metadatos solo se interpretan una vez autenticados.
        metadata = (
            container.decode_metadata(parts.metadata) if parts.metadata is not None else None
        )
        return DecryptResult(plaintext=plaintext, metadata=metadata)


_default_engine = EncryptionEngine()


def encrypt_bytes(
    data: bytes, password: Password, metadata: Optional[FileMetadata] = None
) -> bytes:
    """Cifra con el motor por defecto."""

    return _default_engine.encrypt(data, password, metadata)


def decrypt_bytes(blob: bytes, password: Password) -> DecryptResult:
    """Descifra con el motor por defecto."""

    return _default_engine.decrypt(blob, password)
