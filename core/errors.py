# --------------------------------------------------------------
# File: errors.py
# Description: Taxonomía de errores del motor de protección de archivos.
# --------------------------------------------------------------
"""Excepciones que distinguen cada modo de fallo del motor criptográfico.

Cada clase expone un ``user_message`` pensado para la interfaz: no revela
offsets internos ni si el fallo se debe a corrupción o a manipulación.
"""

from __future__ import annotations

__all__ = [
    "ProtectionError",
    "WeakInputError",
    "MalformedContainerError",
    "IncorrectPasswordError",
    "CryptoBackendError",
    "ExternalToolError",
    "ExternalToolTimeoutError",
]


class ProtectionError(Exception):
    """Base común de los errores del motor de protección."""

    user_message = "No se ha podido procesar el archivo."

    @property
    def kind(self) -> str:
        """Nombre estable del tipo de error para trazas y resultados."""

        return type(self).__name__


class WeakInputError(ProtectionError, ValueError):
    """Contraseña vacía o entrada estructuralmente inválida."""

    user_message = "La contraseña o el archivo proporcionado no son válidos."


class MalformedContainerError(ProtectionError, ValueError):
    """El contenedor cifrado está truncado o no respeta el formato."""

    user_message = "El archivo no es un contenedor cifrado válido o está dañado."


class IncorrectPasswordError(ProtectionError):
    """La verificación AEAD ha fallado: contraseña incorrecta o datos alterados."""

    user_message = "Contraseña incorrecta. Inténtalo de nuevo."


class CryptoBackendError(ProtectionError):
    """La primitiva criptográfica subyacente ha fallado o no está disponible."""

    user_message = "Error interno del motor criptográfico."


class ExternalToolError(ProtectionError):
    """La herramienta externa de protección de PDF ha fallado."""

    user_message = (
        "No se ha podido proteger el PDF. "
        "El archivo puede estar dañado o ya estar cifrado."
    )


class ExternalToolTimeoutError(ExternalToolError):
    """La herramienta externa no respondió dentro del tiempo límite."""

    user_message = "La herramienta de PDF ha tardado demasiado en responder."
