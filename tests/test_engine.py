# --------------------------------------------------------------
# File: test_engine.py
# Description: Pruebas del motor genérico de cifrado por contraseña.
# --------------------------------------------------------------

import hashlib
import os
import struct

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.container import MAGIC, MAGIC_WITH_METADATA, MIN_CONTAINER_LENGTH, encode_metadata
from core.crypto_sym import TAG_LENGTH
from core.engine import EncryptionEngine, decrypt_bytes, encrypt_bytes
from core.errors import (
    CryptoBackendError,
    IncorrectPasswordError,
    MalformedContainerError,
    WeakInputError,
)
from core.models import FileMetadata


@pytest.mark.parametrize("size", [1, 15, 16, 17, 1024, 70_000])
def test_roundtrip(engine, size):
    """Comprueba que descifrar lo cifrado devuelva el contenido original.

    Args:
        engine (EncryptionEngine): Motor con proveedores reales.
        size (int): Tamaño del buffer en claro.

    Returns:
        None: Las aserciones comparan claro y descifrado.
    """
    plaintext = os.urandom(size)
    blob = engine.encrypt(plaintext, "pw-Ñ 1")
    result = engine.decrypt(blob, "pw-Ñ 1")
    assert result.plaintext == plaintext
    assert result.metadata is None


def test_concrete_scenario(engine):
    """Reproduce el escenario de 10 bytes con "correct-horse".

    Returns:
        None: Las aserciones revisan longitud, opacidad y ambos descifrados.
    """
    plaintext = bytes(range(10))
    blob = engine.encrypt(plaintext, "correct-horse")

    assert len(blob) >= 32
    assert len(blob) == MIN_CONTAINER_LENGTH + 10 + TAG_LENGTH
    assert blob[:4] == MAGIC
    assert blob[-(10 + TAG_LENGTH):][:10] != plaintext
    assert engine.decrypt(blob, "correct-horse").plaintext == plaintext
    with pytest.raises(IncorrectPasswordError):
        engine.decrypt(blob, "wrong-password")


def test_empty_plaintext_roundtrip(engine):
    """Garantiza que un buffer vacío sea válido y se recupere vacío.

    Returns:
        None: Las aserciones comparan con b"".
    """
    blob = engine.encrypt(b"", "pw")
    assert len(blob) == MIN_CONTAINER_LENGTH + TAG_LENGTH
    assert engine.decrypt(blob, "pw").plaintext == b""


def test_two_encryptions_differ(engine):
    """Verifica que dos cifrados idénticos produzcan contenedores distintos.

    Returns:
        None: Las aserciones comparan salt, IV y bytes completos.
    """
    plaintext = b"mismo contenido"
    first = engine.encrypt(plaintext, "pw")
    second = engine.encrypt(plaintext, "pw")
    assert first != second
    assert first[4:20] != second[4:20]
    assert first[20:32] != second[20:32]
    assert engine.decrypt(first, "pw").plaintext == plaintext
    assert engine.decrypt(second, "pw").plaintext == plaintext


@pytest.mark.parametrize("other", ["Correct-horse", "correct-horse ", " correct-horse", "correct_horse"])
def test_case_and_whitespace_are_significant(engine, other):
    """Comprueba que contraseñas que difieren en mayúsculas o espacios fallen.

    Args:
        other (str): Variante de la contraseña original.

    Returns:
        None: Se espera IncorrectPasswordError.
    """
    blob = engine.encrypt(b"secreto", "correct-horse")
    with pytest.raises(IncorrectPasswordError):
        engine.decrypt(blob, other)


@pytest.mark.parametrize("position", [0, 1, 9, 10, 25])
def test_bit_flip_in_ciphertext_detected(engine, position):
    """Asegura que alterar un bit del ciphertext o de la etiqueta se detecte.

    Args:
        position (int): Offset dentro de la región de ciphertext.

    Returns:
        None: Se espera IncorrectPasswordError en lugar de claro corrupto.
    """
    blob = bytearray(engine.encrypt(bytes(range(10)), "correct-horse"))
    blob[MIN_CONTAINER_LENGTH + position] ^= 0x01
    with pytest.raises(IncorrectPasswordError):
        engine.decrypt(bytes(blob), "correct-horse")


@pytest.mark.parametrize("region", [slice(4, 20), slice(20, 32)])
def test_tampered_salt_or_iv_detected(engine, region):
    """Comprueba que modificar la salt o el IV invalide el descifrado.

    Args:
        region (slice): Región del contenedor a alterar.

    Returns:
        None: Se espera IncorrectPasswordError.
    """
    blob = bytearray(engine.encrypt(b"datos", "pw"))
    blob[region.start] ^= 0x80
    with pytest.raises(IncorrectPasswordError):
        engine.decrypt(bytes(blob), "pw")


def test_metadata_roundtrip(engine):
    """Verifica que los metadatos embebidos se devuelvan idénticos.

    Returns:
        None: Las aserciones comparan modelo y bloque serializado.
    """
    meta = FileMetadata(filename="foto.png", mime_type="image/png", size=5)
    blob = engine.encrypt(b"\x89PNG!", "pw", meta)
    assert blob[:4] == MAGIC_WITH_METADATA
    block = encode_metadata(meta)
    assert block in blob
    assert len(blob) == 4 + 4 + len(block) + 16 + 12 + 5 + TAG_LENGTH

    result = engine.decrypt(blob, "pw")
    assert result.plaintext == b"\x89PNG!"
    assert result.metadata == meta
    assert encode_metadata(result.metadata) == block


def test_metadata_tampering_detected(engine):
    """Garantiza que el bloque de metadatos esté autenticado.

    Returns:
        None: Se espera IncorrectPasswordError al cambiar el nombre embebido.
    """
    meta = FileMetadata(filename="a.txt", mime_type="text/plain", size=3)
    blob = engine.encrypt(b"abc", "pw", meta)
    tampered = blob.replace(b"a.txt", b"b.txt", 1)
    assert tampered != blob
    with pytest.raises(IncorrectPasswordError):
        engine.decrypt(tampered, "pw")


def test_metadata_corrupted_into_garbage_reports_password_error(engine):
    """Comprueba que un bloque de metadatos ilegible falle igual que una contraseña errónea.

    Returns:
        None: Se espera IncorrectPasswordError y no MalformedContainerError.
    """
    meta = FileMetadata(filename="a.txt", mime_type="text/plain", size=3)
    blob = engine.encrypt(b"abc", "pw", meta)
    (length,) = struct.unpack_from("<I", blob, 4)
    tampered = blob[:8] + b"\xff" * length + blob[8 + length :]
    with pytest.raises(IncorrectPasswordError):
        engine.decrypt(tampered, "pw")


def test_decrypts_container_built_by_web_tool(engine):
    """Descifra un contenedor ENCF construido a mano con la disposición de la herramienta web.

    Returns:
        None: Las aserciones comparan el contenido recuperado.
    """
    password = "contraseña-web"
    salt = bytes(range(16))
    iv = bytes(range(100, 112))
    key = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, 100_000, 32)
    ciphertext = AESGCM(key).encrypt(iv, b"archivo de la web", None)
    blob = MAGIC + salt + iv + ciphertext

    result = engine.decrypt(blob, password)
    assert result.plaintext == b"archivo de la web"
    assert result.metadata is None


def test_truncated_container_is_malformed_not_password(engine):
    """Comprueba que un contenedor truncado no se confunda con contraseña errónea.

    Returns:
        None: Se espera MalformedContainerError.
    """
    blob = engine.encrypt(b"datos", "pw")
    with pytest.raises(MalformedContainerError):
        engine.decrypt(blob[:31], "pw")


@pytest.mark.parametrize("password", ["", b""])
def test_empty_password_rejected_before_crypto(password):
    """Asegura que una contraseña vacía se rechace antes de generar salt o IV.

    Args:
        password (str | bytes): Contraseña vacía.

    Returns:
        None: Se espera WeakInputError sin consumir aleatoriedad.
    """
    calls = []

    def random_bytes(n):
        calls.append(n)
        return os.urandom(n)

    engine = EncryptionEngine(random_bytes=random_bytes)
    with pytest.raises(WeakInputError):
        engine.encrypt(b"datos", password)
    assert calls == []


@pytest.mark.parametrize("data", ["texto", None, 123])
def test_non_bytes_plaintext_rejected(engine, data):
    """Verifica que solo se acepten datos binarios.

    Args:
        data (object): Entrada no binaria.

    Returns:
        None: Se espera WeakInputError.
    """
    with pytest.raises(WeakInputError):
        engine.encrypt(data, "pw")


def test_injected_random_pins_salt_and_iv(fixed_random):
    """Comprueba que la fuente aleatoria inyectada fije salt e IV.

    Returns:
        None: Las aserciones verifican determinismo y llamadas realizadas.
    """
    engine = EncryptionEngine(random_bytes=fixed_random)
    first = engine.encrypt(b"datos", "pw")
    second = engine.encrypt(b"datos", "pw")
    assert first == second
    assert first[4:32] == b"\x42" * 28
    assert fixed_random.calls == [16, 12, 16, 12]


def test_short_random_source_is_backend_error():
    """Garantiza que una fuente aleatoria defectuosa aborte con CryptoBackendError.

    Returns:
        None: Se espera CryptoBackendError.
    """
    engine = EncryptionEngine(random_bytes=lambda n: b"\x00" * (n - 1))
    with pytest.raises(CryptoBackendError):
        engine.encrypt(b"datos", "pw")


def test_failing_aead_is_backend_error():
    """Comprueba que un fallo inesperado del proveedor AEAD sea CryptoBackendError.

    Returns:
        None: Se espera CryptoBackendError en cifrado y descifrado.
    """

    class BrokenAead:
        def encrypt(self, key, nonce, plaintext, aad):
            raise RuntimeError("backend roto")

        def decrypt(self, key, nonce, ciphertext, aad):
            raise RuntimeError("backend roto")

    blob = EncryptionEngine().encrypt(b"datos", "pw")
    broken = EncryptionEngine(aead=BrokenAead())
    with pytest.raises(CryptoBackendError):
        broken.encrypt(b"datos", "pw")
    with pytest.raises(CryptoBackendError):
        broken.decrypt(blob, "pw")


def test_module_helpers_roundtrip():
    """Verifica los atajos de módulo sobre el motor por defecto.

    Returns:
        None: Las aserciones comparan claro y descifrado.
    """
    blob = encrypt_bytes(b"hola", "pw")
    assert decrypt_bytes(blob, "pw").plaintext == b"hola"
