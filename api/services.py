# --------------------------------------------------------------
# File: services.py
# Description: Servicios de procesamiento por lotes para la interfaz web.
# --------------------------------------------------------------
"""Funciones de la capa de servicios: lotes, mensajes de error y descargas."""

from __future__ import annotations

import logging
from typing import Iterable, List, Literal, NamedTuple, Optional, Tuple

from api.dispatcher import FileDispatcher
from api.pdf_protect import get_pdf_protector
from core.config import Settings, get_settings
from core.engine import EncryptionEngine
from core.errors import CryptoBackendError, ProtectionError
from core.files import bundle_zip, validate_upload
from core.models import ProcessedFile

__all__ = [
    "Upload",
    "build_dispatcher",
    "process_batch",
    "prepare_download",
]

logger = logging.getLogger(__name__)

Operation = Literal["encrypt", "decrypt"]

BUNDLE_NAMES = {
    "encrypt": "encrypted_files.zip",
    "decrypt": "decrypted_files.zip",
}


class Upload(NamedTuple):
    """Archivo subido por el usuario."""

    name: str
    mime_type: Optional[str]
    data: bytes


def build_dispatcher(settings: Optional[Settings] = None) -> FileDispatcher:
    """Construye el despachador con el motor por defecto y el colaborador configurado.

    Args:
        settings (Optional[Settings]): Configuración; si falta se lee del entorno.

    Returns:
        FileDispatcher: Despachador listo para usar.

    """

    settings = settings or get_settings()
    protector = get_pdf_protector(settings)
    logger.info("Colaborador de PDF: %s (clave de %d bits)", protector.name, settings.pdf_key_length)
    return FileDispatcher(EncryptionEngine(), protector, pdf_key_length=settings.pdf_key_length)


def process_batch(
    dispatcher: FileDispatcher,
    uploads: Iterable[Upload],
    password: str,
    operation: Operation,
    *,
    max_size: Optional[int] = None,
) -> List[ProcessedFile]:
    """Procesa un lote aislando los fallos de cada archivo.

    Un error de contraseña o de formato en un archivo no detiene el resto. Solo
    `CryptoBackendError` aborta el lote, porque indica un fallo del propio motor.

    Args:
        dispatcher (FileDispatcher): Despachador a utilizar.
        uploads (Iterable[Upload]): Archivos a procesar.
        password (str): Contraseña común para todo el lote.
        operation (Operation): `encrypt` o `decrypt`.
        max_size (Optional[int]): Tamaño máximo por archivo, en bytes.

    Returns:
        List[ProcessedFile]: Estado final de cada archivo, en el orden de entrada.

    Raises:
        CryptoBackendError: Si la primitiva criptográfica no está disponible.

    """

    if operation == "encrypt":
        handler = dispatcher.encrypt_file
    elif operation == "decrypt":
        handler = dispatcher.decrypt_file
    else:
        raise ValueError(f"Operación desconocida: {operation}")

    limit = max_size if max_size is not None else get_settings().max_file_size
    processed: List[ProcessedFile] = []
    for upload in uploads:
        entry = ProcessedFile(name=upload.name, status="processing")
        try:
            validate_upload(upload.name, len(upload.data), limit)
            entry.result = handler(upload.data, upload.name, upload.mime_type, password)
            entry.status = "success"
        except CryptoBackendError:
            logger.exception("Fallo del motor criptográfico con %s; se aborta el lote", upload.name)
            raise
        except ProtectionError as exc:
            logger.warning("%s falló en %s: %s", upload.name, operation, exc.kind)
            entry.status = "error"
            entry.error_kind = exc.kind
            entry.error = exc.user_message
        processed.append(entry)

    ok = sum(1 for item in processed if item.status == "success")
    logger.info("Lote %s: %d/%d archivos correctos", operation, ok, len(processed))
    return processed


def prepare_download(
    processed: Iterable[ProcessedFile], operation: Operation
) -> Optional[Tuple[str, bytes, str]]:
    """Prepara la descarga de los resultados correctos.

    Un único resultado se ofrece directamente; varios se empaquetan en un ZIP.

    Returns:
        Optional[Tuple[str, bytes, str]]: (nombre, contenido, tipo MIME) o `None`
        si no hay ningún resultado correcto.

    """

    results = [item.result for item in processed if item.status == "success" and item.result]
    if not results:
        return None
    if len(results) == 1:
        only = results[0]
        return only.output_name, only.output, only.mime_type
    payload = bundle_zip((item.output_name, item.output) for item in results)
    return BUNDLE_NAMES[operation], payload, "application/zip"
