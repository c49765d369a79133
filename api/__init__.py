# --------------------------------------------------------------
# File: __init__.py
# Description: Capa de servicios: despacho por tipo de archivo y colaboradores PDF.
# --------------------------------------------------------------
"""Inicializa el paquete `api` y documenta sus módulos principales."""

__all__ = [
    "dispatcher",
    "pdf_protect",
    "services",
]
