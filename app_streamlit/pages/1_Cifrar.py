# --------------------------------------------------------------
# File: 1_Cifrar.py
# Description: Gestiona la carga y el cifrado por lotes de archivos en Streamlit.
# --------------------------------------------------------------

import streamlit as st

from api.services import Upload, build_dispatcher, prepare_download, process_batch
from core.config import configure_logging, get_settings
from core.errors import CryptoBackendError
from core.files import format_file_size
from core.models import FileClassification
from core.password_policy import MAX_SCORE, password_strength

configure_logging()
settings = get_settings()

# Presenta el título de la sección dedicada al cifrado.
st.title("🔒 Cifrar archivos")
st.caption(
    f"Tamaño máximo por archivo: {format_file_size(settings.max_file_size)}. "
    "Los PDF conservan su formato con protección nativa."
)

files = st.file_uploader("Selecciona uno o varios archivos", type=None, accept_multiple_files=True)

password = st.text_input("Contraseña", type="password", placeholder="Introduce una contraseña robusta")
confirm = st.text_input("Confirma la contraseña", type="password")

# Muestra el indicador orientativo de robustez.
if password:
    strength = password_strength(password)
    st.progress(strength.score / MAX_SCORE, text=f"Robustez: {strength.label}")
    for reason in strength.reasons:
        st.caption(f"• {reason}")

if st.button("Cifrar", disabled=not files):
    if not password:
        st.error("Introduce una contraseña para cifrar tus archivos.")
        st.stop()
    if password != confirm:
        st.error("Las contraseñas no coinciden.")
        st.stop()

    uploads = [Upload(name=f.name, mime_type=f.type, data=f.getvalue()) for f in files]
    dispatcher = build_dispatcher(settings)
    try:
        with st.spinner("Cifrando..."):
            processed = process_batch(
                dispatcher, uploads, password, "encrypt", max_size=settings.max_file_size
            )
    except CryptoBackendError as exc:
        st.error(exc.user_message)
        st.stop()

    # Presenta el estado final de cada archivo del lote.
    for item in processed:
        if item.status == "success":
            kind = "PDF nativo" if item.result.classification is FileClassification.PDF else "AES-256-GCM"
            st.success(f"{item.name}: cifrado ({kind}, {format_file_size(len(item.result.output))})")
        else:
            st.error(f"{item.name}: {item.error}")

    ok_count = sum(1 for item in processed if item.status == "success")
    if ok_count:
        st.info(f"Se han cifrado {ok_count} archivo(s). Guarda la contraseña: la necesitarás para descifrarlos.")

    download = prepare_download(processed, "encrypt")
    if download:
        name, payload, mime = download
        st.download_button("⬇️ Descargar", data=payload, file_name=name, mime=mime)
