# --------------------------------------------------------------
# File: 2_Descifrar.py
# Description: Permite descifrar contenedores y desbloquear PDF desde Streamlit.
# --------------------------------------------------------------

import streamlit as st

from api.services import Upload, build_dispatcher, prepare_download, process_batch
from core.config import configure_logging, get_settings
from core.errors import CryptoBackendError
from core.files import format_file_size

configure_logging()
settings = get_settings()

# Presenta el título de la sección orientada a la restauración.
st.title("🔓 Descifrar archivos")
st.caption("Acepta archivos cifrados con CryptoDocs y PDF protegidos con contraseña.")

files = st.file_uploader("Selecciona los archivos cifrados", type=None, accept_multiple_files=True)
password = st.text_input("Contraseña", type="password", placeholder="Introduce la contraseña actual")
st.caption("Los archivos se procesan en este servidor y no se conservan. Nunca guardamos tu contraseña.")

if st.button("Descifrar", disabled=not files):
    if not password:
        st.error("Introduce la contraseña con la que se cifraron los archivos.")
        st.stop()

    uploads = [Upload(name=f.name, mime_type=f.type, data=f.getvalue()) for f in files]
    dispatcher = build_dispatcher(settings)
    try:
        with st.spinner("Descifrando..."):
            processed = process_batch(
                dispatcher, uploads, password, "decrypt", max_size=settings.max_file_size
            )
    except CryptoBackendError as exc:
        st.error(exc.user_message)
        st.stop()

    for item in processed:
        if item.status == "success":
            result = item.result
            st.success(
                f"{item.name}: recuperado como {result.output_name} "
                f"({format_file_size(len(result.output))})"
            )
            if result.metadata:
                st.caption(f"Tipo original: {result.metadata.mime_type}")
        else:
            st.error(f"{item.name}: {item.error}")

    download = prepare_download(processed, "decrypt")
    if download:
        name, payload, mime = download
        st.download_button("⬇️ Descargar", data=payload, file_name=name, mime=mime)
