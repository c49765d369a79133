# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas para aislar la configuración y los colaboradores.
# --------------------------------------------------------------

from typing import Iterator, List, Tuple

import pytest

from api.dispatcher import FileDispatcher
from core.engine import EncryptionEngine
from core.errors import ExternalToolError, IncorrectPasswordError

_CONFIG_VARS = (
    "PDF_BACKEND",
    "QPDF_PATH",
    "QPDF_TIMEOUT",
    "PDF_KEY_LENGTH",
    "MAX_FILE_SIZE_MB",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch) -> Iterator[None]:
    """Elimina las variables de configuración para que cada prueba parta de los valores por defecto.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar variables de entorno.

    Returns:
        Iterator[None]: Control del fixture autouse durante la ejecución de cada test.
    """
    for name in _CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


class FixedRandom:
    """Fuente determinista que devuelve siempre el mismo byte repetido."""

    def __init__(self, fill: int = 0x42) -> None:
        self.fill = fill
        self.calls: List[int] = []

    def __call__(self, length: int) -> bytes:
        self.calls.append(length)
        return bytes([self.fill]) * length


class FakePdfProtector:
    """Colaborador de PDF en memoria que registra sus llamadas.

    `protect` antepone una marca a los bytes; `unlock` la retira si la
    contraseña coincide con la última usada para proteger.
    """

    name = "fake"
    marker = b"%LOCKED%"

    def __init__(self) -> None:
        self.calls: List[Tuple[str, bytes, str, int]] = []
        self.password = None
        self.fail = False

    def protect(self, data: bytes, password: str, *, key_length: int = 256) -> bytes:
        self.calls.append(("protect", data, password, key_length))
        if self.fail:
            raise ExternalToolError("fallo simulado")
        self.password = password
        return self.marker + data

    def unlock(self, data: bytes, password: str) -> bytes:
        self.calls.append(("unlock", data, password, 0))
        if self.fail or not data.startswith(self.marker):
            raise ExternalToolError("fallo simulado")
        if password != self.password:
            raise IncorrectPasswordError("contraseña simulada incorrecta")
        return data[len(self.marker):]


@pytest.fixture
def fixed_random() -> FixedRandom:
    """Fuente aleatoria determinista para fijar salt e IV."""
    return FixedRandom()


@pytest.fixture
def engine() -> EncryptionEngine:
    """Motor con los proveedores reales."""
    return EncryptionEngine()


@pytest.fixture
def fake_protector() -> FakePdfProtector:
    """Colaborador de PDF simulado."""
    return FakePdfProtector()


@pytest.fixture
def dispatcher(engine, fake_protector) -> FileDispatcher:
    """Despachador con motor real y colaborador de PDF simulado."""
    return FileDispatcher(engine, fake_protector)
