# --------------------------------------------------------------
# File: password_policy.py
# Description: Indicador orientativo de robustez de contraseñas de cifrado.
# --------------------------------------------------------------
"""Utilidades para evaluar la robustez de contraseñas en CryptoDocs.

La puntuación es solo orientativa: el motor acepta cualquier contraseña no
vacía, la interfaz la usa para avisar al usuario.
"""

from __future__ import annotations

import re
from typing import List

from pydantic import BaseModel

COMMON = {
    "123456",
    "123456789",
    "12345678",
    "qwerty",
    "password",
    "111111",
    "123123",
    "000000",
    "abc123",
    "letmein",
    "iloveyou",
    "admin",
    "welcome",
    "monkey",
    "dragon",
    "football",
    "baseball",
    "princess",
    "qwertyuiop",
    "passw0rd",
}

LOWER = re.compile(r"[a-z]")
UPPER = re.compile(r"[A-Z]")
DIGIT = re.compile(r"\d")
SYMBOL = re.compile(r"[^a-zA-Z0-9]")

MAX_SCORE = 5


class PasswordStrength(BaseModel):
    """Resultado de la evaluación.

    Attributes:
        score (int): Puntuación entre 0 y 5.
        label (str): Etiqueta legible (Débil, Aceptable, Buena, Fuerte).
        reasons (List[str]): Sugerencias para mejorar la contraseña.

    """

    score: int
    label: str
    reasons: List[str]


def strength_label(score: int) -> str:
    """Traduce la puntuación a una etiqueta para la interfaz."""

    if score <= 1:
        return "Débil"
    if score <= 2:
        return "Aceptable"
    if score <= 3:
        return "Buena"
    return "Fuerte"


def password_strength(password: str) -> PasswordStrength:
    """Evalúa la contraseña y devuelve puntuación, etiqueta y sugerencias.

    Args:
        password (str): Contraseña propuesta por el usuario.

    Returns:
        PasswordStrength: Puntuación de 0 a 5 con sus motivos.

    """

    reasons: List[str] = []
    score = 0

    if len(password) >= 8:
        score += 1
    else:
        reasons.append("Usa al menos 8 caracteres.")

    if len(password) >= 12:
        score += 1
    else:
        reasons.append("Con 12 caracteres o más es mucho más robusta.")

    if LOWER.search(password) and UPPER.search(password):
        score += 1
    else:
        reasons.append("Combina minúsculas y mayúsculas.")

    if DIGIT.search(password):
        score += 1
    else:
        reasons.append("Incluye algún dígito.")

    if SYMBOL.search(password):
        score += 1
    else:
        reasons.append("Incluye algún símbolo.")

    if password.lower() in COMMON:
        score = 0
        reasons.insert(0, "Contraseña demasiado común.")

    return PasswordStrength(score=score, label=strength_label(score), reasons=reasons)
