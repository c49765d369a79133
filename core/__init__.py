# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública de utilidades criptográficas del paquete core.
# --------------------------------------------------------------
"""Inicializa el paquete `core` y documenta sus módulos principales."""

__all__ = [
    "config",
    "container",
    "crypto_kdf",
    "crypto_sym",
    "engine",
    "errors",
    "files",
    "models",
    "password_policy",
]
