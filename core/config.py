# --------------------------------------------------------------
# File: config.py
# Description: Configuración de la aplicación leída del entorno (.env).
# --------------------------------------------------------------
"""Parámetros configurables del backend de PDF, límites de subida y logging."""

from __future__ import annotations

import logging
import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()

PDF_BACKEND = os.getenv("PDF_BACKEND", "qpdf")
QPDF_PATH = os.getenv("QPDF_PATH", "qpdf")
QPDF_TIMEOUT = os.getenv("QPDF_TIMEOUT", "60")
PDF_KEY_LENGTH = os.getenv("PDF_KEY_LENGTH", "256")
MAX_FILE_SIZE_MB = os.getenv("MAX_FILE_SIZE_MB", "500")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseModel):
    """Valores tipados de configuración.

    Attributes:
        pdf_backend (str): Colaborador de PDF a utilizar (`qpdf` o `pikepdf`).
        qpdf_path (str): Ejecutable de qpdf.
        qpdf_timeout (float): Tiempo máximo en segundos por invocación de qpdf.
        pdf_key_length (int): Longitud de clave del cifrado nativo de PDF.
        max_file_size_mb (int): Tamaño máximo permitido por archivo subido.
        log_level (str): Nivel de logging.

    """

    model_config = ConfigDict(frozen=True)

    pdf_backend: Literal["qpdf", "pikepdf"] = "qpdf"
    qpdf_path: str = "qpdf"
    qpdf_timeout: float = Field(default=60.0, gt=0)
    pdf_key_length: Literal[128, 256] = 256
    max_file_size_mb: int = Field(default=500, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Nivel de logging desconocido: {value}")
        return level

    @property
    def max_file_size(self) -> int:
        """Tamaño máximo en bytes."""

        return self.max_file_size_mb * 1024 * 1024


def get_settings() -> Settings:
    """Construye la configuración a partir de las variables de entorno actuales.

    Returns:
        Settings: Configuración validada.

    Raises:
        ValueError: Si alguna variable tiene un valor no admitido.

    """

    return Settings(
        pdf_backend=os.getenv("PDF_BACKEND", PDF_BACKEND).strip().lower(),
        qpdf_path=os.getenv("QPDF_PATH", QPDF_PATH),
        qpdf_timeout=float(os.getenv("QPDF_TIMEOUT", QPDF_TIMEOUT)),
        pdf_key_length=int(os.getenv("PDF_KEY_LENGTH", PDF_KEY_LENGTH)),
        max_file_size_mb=int(os.getenv("MAX_FILE_SIZE_MB", MAX_FILE_SIZE_MB)),
        log_level=os.getenv("LOG_LEVEL", LOG_LEVEL),
    )


def configure_logging(level: str | None = None) -> None:
    """Inicializa el logging raíz una única vez con el formato de la aplicación."""

    root = logging.getLogger()
    if root.hasHandlers():
        return
    logging.basicConfig(level=(level or get_settings().log_level), format=LOG_FORMAT)
