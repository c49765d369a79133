# --------------------------------------------------------------
# File: container.py
# Description: Codificación binaria del contenedor cifrado autodescriptivo.
# --------------------------------------------------------------
"""Serialización y validación del formato de contenedor cifrado.

Layout (campos de longitud en little-endian)::

    ENCF | salt(16) | iv(12) | ciphertext+tag
    ENCM | u32 L | metadata(L) | salt(16) | iv(12) | ciphertext+tag

`ENCF` es compatible byte a byte con los archivos del cifrador web original.
`ENCM` añade el bloque de metadatos (JSON compacto con claves ordenadas).
"""

from __future__ import annotations

import json
import struct
from typing import Optional

from pydantic import ValidationError

from core.crypto_kdf import SALT_LENGTH
from core.crypto_sym import NONCE_LENGTH, TAG_LENGTH
from core.errors import MalformedContainerError, WeakInputError
from core.models import ContainerParts, FileMetadata

__all__ = [
    "MAGIC",
    "MAGIC_WITH_METADATA",
    "MIN_CONTAINER_LENGTH",
    "encode",
    "decode",
    "encode_metadata",
    "decode_metadata",
]

MAGIC = b"ENCF"
MAGIC_WITH_METADATA = b"ENCM"
MAGIC_LENGTH = 4

_LENGTH_FIELD = struct.Struct("<I")
_U32_MAX = 0xFFFFFFFF

PARAMS_LENGTH = SALT_LENGTH + NONCE_LENGTH
MIN_CONTAINER_LENGTH = MAGIC_LENGTH + PARAMS_LENGTH


def encode_metadata(metadata: FileMetadata) -> bytes:
    """Serializa los metadatos como JSON compacto y determinista."""

    payload = {
        "filename": metadata.filename,
        "mime_type": metadata.mime_type,
        "size": metadata.size,
    }
    return json.dumps(payload, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode(
        "utf-8"
    )


def decode_metadata(block: bytes) -> FileMetadata:
    """Reconstruye los metadatos desde su bloque serializado.

    Raises:
        MalformedContainerError: Si el bloque no es JSON UTF-8 con las claves esperadas.

    """

    try:
        payload = json.loads(block.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedContainerError("Bloque de metadatos ilegible.") from exc
    if not isinstance(payload, dict) or set(payload) != {"filename", "mime_type", "size"}:
        raise MalformedContainerError("Bloque de metadatos con claves inesperadas.")
    try:
        return FileMetadata(**payload)
    except ValidationError as exc:
        raise MalformedContainerError("Bloque de metadatos con valores inválidos.") from exc


def encode(
    salt: bytes, iv: bytes, ciphertext: bytes, metadata: Optional[bytes] = None
) -> bytes:
    """Construye los bytes del contenedor.

    Args:
        salt (bytes): Salt de 16 bytes.
        iv (bytes): Nonce de 12 bytes.
        ciphertext (bytes): Salida AEAD con etiqueta incluida.
        metadata (Optional[bytes]): Bloque de metadatos ya serializado.

    Returns:
        bytes: Contenedor listo para escribir o descargar.

    """

    if len(salt) != SALT_LENGTH:
        raise WeakInputError(f"La salt debe medir {SALT_LENGTH} bytes.")
    if len(iv) != NONCE_LENGTH:
        raise WeakInputError(f"El IV debe medir {NONCE_LENGTH} bytes.")

    if metadata is None:
        return b"".join((MAGIC, salt, iv, ciphertext))

    if len(metadata) > _U32_MAX:
        raise MalformedContainerError("Bloque de metadatos demasiado grande.")
    return b"".join(
        (MAGIC_WITH_METADATA, _LENGTH_FIELD.pack(len(metadata)), metadata, salt, iv, ciphertext)
    )


def decode(data: bytes) -> ContainerParts:
    """Separa y valida los campos de un contenedor.

    Toda comprobación estructural se hace antes de cualquier operación
    criptográfica y nunca se lee más allá del final del buffer.

    Raises:
        MalformedContainerError: Si el buffer está truncado, el magic es
            desconocido o la longitud de metadatos es incoherente.

    """

    data = bytes(data)
    if len(data) < MIN_CONTAINER_LENGTH:
        raise MalformedContainerError("Contenedor truncado.")

    magic = data[:MAGIC_LENGTH]
    offset = MAGIC_LENGTH
    metadata: Optional[bytes] = None

    if magic == MAGIC_WITH_METADATA:
        if len(data) < offset + _LENGTH_FIELD.size:
            raise MalformedContainerError("Falta la longitud de metadatos.")
        (length,) = _LENGTH_FIELD.unpack_from(data, offset)
        offset += _LENGTH_FIELD.size
        if len(data) - offset < length:
            raise MalformedContainerError("Bloque de metadatos truncado.")
        metadata = data[offset : offset + length]
        offset += length
    elif magic != MAGIC:
        raise MalformedContainerError("Formato de contenedor desconocido.")

    if len(data) - offset < PARAMS_LENGTH:
        raise MalformedContainerError("Faltan la salt o el IV.")
    salt = data[offset : offset + SALT_LENGTH]
    offset += SALT_LENGTH
    iv = data[offset : offset + NONCE_LENGTH]
    offset += NONCE_LENGTH

    ciphertext = data[offset:]
    if len(ciphertext) < TAG_LENGTH:
        raise MalformedContainerError("Ciphertext más corto que la etiqueta.")

    return ContainerParts(magic=magic, salt=salt, iv=iv, metadata=metadata, ciphertext=ciphertext)
