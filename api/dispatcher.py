# --------------------------------------------------------------
# File: dispatcher.py
# Description: Clasificación de archivos y enrutado a PDF nativo o cifrado genérico.
# --------------------------------------------------------------
"""Despachador que decide cómo se protege cada archivo.

Los PDF se envían tal cual al colaborador externo y su salida se devuelve sin
re-cifrar. El resto de archivos pasan por el motor genérico. Todos conservan su
nombre original al cifrarse: el contenedor genérico guarda nombre, tipo MIME y
tamaño en su bloque de metadatos.
"""

from __future__ import annotations

import logging
from typing import Optional, assert_never

from core.engine import EncryptionEngine
from core.models import FileClassification, FileMetadata, ProtectedFile
from api.pdf_protect import PdfProtector

__all__ = ["classify", "FileDispatcher"]

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
CONTAINER_MIME = "application/octet-stream"


def classify(filename: str, mime_type: Optional[str]) -> FileClassification:
    """Clasifica un archivo a partir del tipo MIME declarado y la extensión.

    Es una heurística, no un análisis del contenido: un archivo renombrado a
    `.pdf` se clasifica como PDF.

    Args:
        filename (str): Nombre del archivo subido.
        mime_type (Optional[str]): Tipo MIME declarado por el navegador.

    Returns:
        FileClassification: `PDF` o `GENERIC`.

    """

    if mime_type and "pdf" in mime_type.lower():
        return FileClassification.PDF
    if filename and filename.lower().endswith(".pdf"):
        return FileClassification.PDF
    return FileClassification.GENERIC


class FileDispatcher:
    """Enruta cada archivo al colaborador de PDF o al motor genérico.

    Args:
        engine (EncryptionEngine): Motor de cifrado genérico.
        pdf_protector (PdfProtector): Colaborador de protección nativa de PDF.
        pdf_key_length (int): Longitud de clave que se pide al colaborador.

    """

    def __init__(
        self,
        engine: EncryptionEngine,
        pdf_protector: PdfProtector,
        pdf_key_length: int = 256,
    ) -> None:
        self.engine = engine
        self.pdf_protector = pdf_protector
        self.pdf_key_length = pdf_key_length

    def encrypt_file(
        self, data: bytes, filename: str, mime_type: Optional[str], password: str
    ) -> ProtectedFile:
        """Protege un archivo según su clasificación."""

        classification = classify(filename, mime_type)
        logger.info("Cifrando %s (%d bytes) por la ruta %s", filename, len(data), classification.value)

        if classification is FileClassification.PDF:
            output = self.pdf_protector.protect(data, password, key_length=self.pdf_key_length)
            return ProtectedFile(
                classification=classification,
                output=output,
                output_name=filename,
                mime_type=PDF_MIME,
            )
        elif classification is FileClassification.GENERIC:
            metadata = FileMetadata(
                filename=filename,
                mime_type=mime_type or CONTAINER_MIME,
                size=len(data),
            )
            output = self.engine.encrypt(data, password, metadata)
            return ProtectedFile(
                classification=classification,
                output=output,
                output_name=filename,
                mime_type=CONTAINER_MIME,
                metadata=metadata,
            )
        else:
            assert_never(classification)

    def decrypt_file(
        self, data: bytes, filename: str, mime_type: Optional[str], password: str
    ) -> ProtectedFile:
        """Desbloquea un PDF o descifra un contenedor genérico."""

        classification = classify(filename, mime_type)
        logger.info("Descifrando %s (%d bytes) por la ruta %s", filename, len(data), classification.value)

        if classification is FileClassification.PDF:
            output = self.pdf_protector.unlock(data, password)
            return ProtectedFile(
                classification=classification,
                output=output,
                output_name=filename,
                mime_type=PDF_MIME,
            )
        elif classification is FileClassification.GENERIC:
            result = self.engine.decrypt(data, password)
            metadata = result.metadata
            return ProtectedFile(
                classification=classification,
                output=result.plaintext,
                output_name=metadata.filename if metadata else filename,
                mime_type=metadata.mime_type if metadata else CONTAINER_MIME,
                metadata=metadata,
            )
        else:
            assert_never(classification)
