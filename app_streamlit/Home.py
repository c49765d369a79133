# --------------------------------------------------------------
# File: Home.py
# Description: Define la página principal de Streamlit con el resumen del flujo.
# --------------------------------------------------------------

import streamlit as st

from core.config import configure_logging

configure_logging()

# Configura los metadatos de la página principal de la aplicación.
st.set_page_config(page_title="CryptoDocs", page_icon="🔐", layout="centered")

# Presenta el nombre del producto y su propósito general.
st.title("🔐 CryptoDocs")
st.write(
    "Protege imágenes, documentos, PDF, ZIP y cualquier otro archivo con contraseña. "
    "Los PDF reciben protección nativa (AES-256); el resto se cifra con "
    "PBKDF2-SHA256 + AES-256-GCM."
)
st.info(
    "Ve a **Cifrar** para proteger tus archivos o a **Descifrar** para recuperarlos. "
    "No guardamos contraseñas: si la olvidas, el archivo no se puede recuperar."
)
