# --------------------------------------------------------------
# File: files.py
# Description: Utilidades para validar subidas y preparar descargas.
# --------------------------------------------------------------
"""Funciones auxiliares sobre archivos subidos y resultados descargables."""

from __future__ import annotations

import io
import os
import zipfile
from typing import Iterable, Tuple

from core.errors import WeakInputError

__all__ = [
    "MAX_FILE_SIZE",
    "validate_upload",
    "format_file_size",
    "secure_name",
    "bundle_zip",
]

MAX_FILE_SIZE = 500 * 1024 * 1024

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_file_size(size: int) -> str:
    """Formatea un tamaño en bytes de forma legible (p. ej. ``1.5 KB``)."""

    if size <= 0:
        return "0 Bytes"
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(_SIZE_UNITS) - 1:
        exponent += 1
    value = round(size / 1024**exponent, 2)
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def validate_upload(filename: str, size: int, max_size: int = MAX_FILE_SIZE) -> None:
    """Comprueba que un archivo subido pueda procesarse.

    Args:
        filename (str): Nombre declarado del archivo.
        size (int): Tamaño en bytes.
        max_size (int): Límite superior admitido.

    Raises:
        WeakInputError: Si falta el nombre o se supera el tamaño máximo.

    """

    if not filename or not filename.strip():
        raise WeakInputError("El archivo no tiene nombre.")
    if size > max_size:
        raise WeakInputError(
            f'El archivo "{filename}" supera el límite de {format_file_size(max_size)}.'
        )


def secure_name(name: str) -> str:
    """Normaliza el nombre de archivo para evitar rutas o caracteres problemáticos."""

    name = os.path.basename(name.replace("\\", "/"))
    for ch in '<>:"|?*':
        name = name.replace(ch, "_")
    name = name.strip().replace("..", "_")
    return name or "archivo"


def bundle_zip(entries: Iterable[Tuple[str, bytes]]) -> bytes:
    """Empaqueta varios resultados en un ZIP en memoria.

    Los nombres repetidos reciben un sufijo numérico para no sobrescribirse.

    Args:
        entries (Iterable[Tuple[str, bytes]]): Pares (nombre, contenido).

    Returns:
        bytes: Contenido del archivo ZIP.

    """

    buffer = io.BytesIO()
    used = set()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, payload in entries:
            arcname = secure_name(name)
            stem, ext = os.path.splitext(arcname)
            counter = 1
            while arcname in used:
                arcname = f"{stem} ({counter}){ext}"
                counter += 1
            used.add(arcname)
            archive.writestr(arcname, payload)
    return buffer.getvalue()
