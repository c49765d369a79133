# --------------------------------------------------------------
# File: pdf_protect.py
# Description: Colaboradores externos para la protección nativa de PDF.
# --------------------------------------------------------------
"""Protección y desbloqueo de PDF delegados en qpdf o pikepdf.

El motor no implementa criptografía a nivel de PDF: estos colaboradores reciben
los bytes y la contraseña tal cual y devuelven el PDF resultante. Sus fallos se
notifican como `ExternalToolError`, nunca como error de contraseña, salvo al
desbloquear con una contraseña que el propio colaborador rechaza.
"""

from __future__ import annotations

import io
import logging
import os
import subprocess
import tempfile
from typing import Protocol

import pikepdf

from core.config import Settings
from core.errors import (
    ExternalToolError,
    ExternalToolTimeoutError,
    IncorrectPasswordError,
    WeakInputError,
)

__all__ = [
    "PdfProtector",
    "QpdfProtector",
    "PikepdfProtector",
    "get_pdf_protector",
]

logger = logging.getLogger(__name__)

KEY_LENGTHS = (128, 256)

# qpdf: 2 = error, 3 = avisos (la salida se escribe igualmente).
_QPDF_EXIT_WARNINGS = 3


def _check_key_length(key_length: int) -> None:
    if key_length not in KEY_LENGTHS:
        raise WeakInputError(f"Longitud de clave de PDF no soportada: {key_length}")


def _check_password(password: str) -> None:
    if not password:
        raise WeakInputError("La contraseña no puede estar vacía.")


def _check_line_safe(password: str) -> None:
    # El fichero de argumentos de qpdf separa los argumentos por líneas.
    if "\n" in password or "\r" in password:
        raise WeakInputError("qpdf no admite contraseñas con saltos de línea.")


class PdfProtector(Protocol):
    """Interfaz del colaborador de protección de PDF."""

    name: str

    def protect(self, data: bytes, password: str, *, key_length: int = 256) -> bytes:
        """Devuelve el PDF protegido; la contraseña es a la vez de usuario y propietario."""
        ...

    def unlock(self, data: bytes, password: str) -> bytes:
        """Devuelve el PDF sin protección."""
        ...


class QpdfProtector:
    """Invoca el ejecutable `qpdf` en un subproceso.

    Los argumentos, contraseña incluida, se entregan por la entrada estándar
    mediante `@-`, de modo que nunca aparecen en la lista de procesos y qpdf
    no los interpreta como opciones aunque empiecen por `-` o `@`.

    Args:
        executable (str): Ruta o nombre del ejecutable.
        timeout (float): Segundos máximos por invocación.

    """

    name = "qpdf"

    def __init__(self, executable: str = "qpdf", timeout: float = 60.0) -> None:
        self.executable = executable
        self.timeout = timeout

    def _run(self, args: list[str], data: bytes, *, unlocking: bool) -> bytes:
        with tempfile.TemporaryDirectory(prefix="cryptodocs-") as workdir:
            input_path = os.path.join(workdir, "input.pdf")
            output_path = os.path.join(workdir, "output.pdf")
            with open(input_path, "wb") as handler:
                handler.write(data)

            # Un argumento por línea en el fichero de argumentos de qpdf.
            arg_file = "".join(f"{arg}\n" for arg in [*args, input_path, output_path])
            try:
                result = subprocess.run(
                    [self.executable, "@-"],
                    input=arg_file,
                    capture_output=True,
                    text=True,
                    check=False,
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as exc:
                logger.error("qpdf superó el tiempo límite de %.1fs", self.timeout)
                raise ExternalToolTimeoutError("qpdf no respondió a tiempo.") from exc
            except OSError as exc:
                logger.error("qpdf no se pudo ejecutar (%s): %s", self.executable, exc)
                raise ExternalToolError("qpdf no está disponible.") from exc

            stderr = (result.stderr or "").strip()
            if result.returncode not in (0, _QPDF_EXIT_WARNINGS):
                # qpdf no ofrece un código específico para contraseña inválida.
                if unlocking and "invalid password" in stderr.lower():
                    raise IncorrectPasswordError("qpdf rechazó la contraseña.")
                logger.error("qpdf terminó con código %s", result.returncode)
                raise ExternalToolError(f"qpdf falló con código {result.returncode}.")
            if result.returncode == _QPDF_EXIT_WARNINGS:
                logger.warning("qpdf terminó con avisos")

            try:
                with open(output_path, "rb") as handler:
                    return handler.read()
            except FileNotFoundError as exc:
                raise ExternalToolError("qpdf no generó el archivo de salida.") from exc

    def protect(self, data: bytes, password: str, *, key_length: int = 256) -> bytes:
        _check_password(password)
        _check_line_safe(password)
        _check_key_length(key_length)
        args = [
            "--encrypt",
            f"--user-password={password}",
            f"--owner-password={password}",
            f"--bits={key_length}",
        ]
        if key_length == 128:
            args.append("--use-aes=y")
        args.append("--")
        return self._run(args, data, unlocking=False)

    def unlock(self, data: bytes, password: str) -> bytes:
        _check_password(password)
        _check_line_safe(password)
        return self._run([f"--password={password}", "--decrypt"], data, unlocking=True)


class PikepdfProtector:
    """Protección en proceso mediante `pikepdf`, con errores de contraseña tipados."""

    name = "pikepdf"

    def protect(self, data: bytes, password: str, *, key_length: int = 256) -> bytes:
        _check_password(password)
        _check_key_length(key_length)
        if key_length == 256:
            encryption = pikepdf.Encryption(user=password, owner=password, R=6)
        else:
            encryption = pikepdf.Encryption(user=password, owner=password, R=4, aes=True)

        output = io.BytesIO()
        try:
            with pikepdf.open(io.BytesIO(data)) as pdf:
                pdf.save(output, encryption=encryption)
        except pikepdf.PasswordError as exc:
            # El PDF ya estaba cifrado.
            raise ExternalToolError("El PDF ya está protegido.") from exc
        except pikepdf.PdfError as exc:
            raise ExternalToolError("pikepdf no pudo procesar el PDF.") from exc
        return output.getvalue()

    def unlock(self, data: bytes, password: str) -> bytes:
        _check_password(password)
        output = io.BytesIO()
        try:
            with pikepdf.open(io.BytesIO(data), password=password) as pdf:
                pdf.save(output)
        except pikepdf.PasswordError as exc:
            raise IncorrectPasswordError("pikepdf rechazó la contraseña.") from exc
        except pikepdf.PdfError as exc:
            raise ExternalToolError("pikepdf no pudo procesar el PDF.") from exc
        return output.getvalue()


def get_pdf_protector(settings: Settings) -> PdfProtector:
    """Construye el colaborador configurado en `PDF_BACKEND`."""

    if settings.pdf_backend == "pikepdf":
        return PikepdfProtector()
    return QpdfProtector(executable=settings.qpdf_path, timeout=settings.qpdf_timeout)
