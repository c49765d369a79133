# --------------------------------------------------------------
# File: models.py
# Description: Modelos de datos comunes utilizados por la capa criptográfica.
# --------------------------------------------------------------
"""Modelos Pydantic que encapsulan estructuras de intercambio criptográfico."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileClassification(str, Enum):
    """Categoría de un archivo a efectos de enrutado."""

    PDF = "pdf"
    GENERIC = "generic"


class FileMetadata(BaseModel):
    """Metadatos del archivo original embebidos en el contenedor.

    Attributes:
        filename (str): Nombre original del archivo.
        mime_type (str): Tipo MIME declarado en la subida.
        size (int): Tamaño en bytes del contenido en claro.

    """

    model_config = ConfigDict(frozen=True)

    filename: str
    mime_type: str = "application/octet-stream"
    size: int = Field(ge=0)


class ContainerParts(BaseModel):
    """Campos de un contenedor cifrado ya decodificado.

    Attributes:
        magic (bytes): Centinela de formato.
        salt (bytes): Salt de 16 bytes usada en la derivación de clave.
        iv (bytes): Nonce de 12 bytes de AES-GCM.
        metadata (Optional[bytes]): Bloque de metadatos tal y como está serializado.
        ciphertext (bytes): Datos cifrados con la etiqueta de autenticación al final.

    """

    model_config = ConfigDict(frozen=True)

    magic: bytes
    salt: bytes
    iv: bytes
    metadata: Optional[bytes] = None
    ciphertext: bytes


class DecryptResult(BaseModel):
    """Resultado de descifrar un contenedor genérico."""

    plaintext: bytes
    metadata: Optional[FileMetadata] = None


class ProtectedFile(BaseModel):
    """Salida del despachador para un archivo concreto.

    Attributes:
        classification (FileClassification): Ruta seguida por el archivo.
        output (bytes): Bytes resultantes (PDF protegido, contenedor o claro).
        output_name (str): Nombre con el que se ofrece la descarga.
        mime_type (str): Tipo MIME de la descarga.
        metadata (Optional[FileMetadata]): Metadatos embebidos o recuperados.

    """

    classification: FileClassification
    output: bytes
    output_name: str
    mime_type: str
    metadata: Optional[FileMetadata] = None


class ProcessedFile(BaseModel):
    """Estado de un archivo dentro de un lote."""

    name: str
    status: Literal["pending", "processing", "success", "error"] = "pending"
    result: Optional[ProtectedFile] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None
