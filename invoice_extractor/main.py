"""
Invoice Batch Extractor - Main Streamlit UI

Upload up to 10 invoice images, extract key fields with Gemini,
review them in a table and download the result as Excel.

Run with:
    streamlit run invoice_extractor/main.py
"""

import asyncio
import logging
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from invoice_extractor.config import get_config, validate_system_requirements
from invoice_extractor.models.invoice import SelectedFile
from invoice_extractor.pipeline.session import ExtractionSession

# Configure logging
logging.basicConfig(
    level=get_config().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

IMAGE_TYPES = ["png", "jpg", "jpeg", "webp", "gif", "bmp", "tiff", "tif"]
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def init_session_state():
    """Initialize Streamlit session state."""
    if "config" not in st.session_state:
        st.session_state.config = get_config()

    if "extraction" not in st.session_state:
        st.session_state.extraction = ExtractionSession(config=st.session_state.config)

    if "system_validated" not in st.session_state:
        st.session_state.system_validated = False

    if "validation_results" not in st.session_state:
        st.session_state.validation_results = None


def validate_system():
    """Validate configuration on startup."""
    if not st.session_state.system_validated:
        with st.spinner("Checking Gemini configuration..."):
            st.session_state.validation_results = validate_system_requirements(
                st.session_state.config
            )
            st.session_state.system_validated = True

    return st.session_state.validation_results


def render_sidebar():
    """Render the status sidebar."""
    results = st.session_state.validation_results or {}
    config = st.session_state.config

    with st.sidebar:
        st.header("⚙️ Settings")

        st.subheader("Gemini")
        st.text(f"Model: {config.gemini.model}")

        if results.get("api_key", {}).get("configured"):
            st.success("✅ API key configured")
        else:
            st.error("❌ GEMINI_API_KEY not set in .env")

        gemini = results.get("gemini", {})
        if gemini.get("available"):
            st.success(gemini.get("message", "Gemini reachable"))
        elif gemini:
            st.warning(f"⚠️ {gemini.get('message')}")

        st.divider()

        if st.button("🔄 Refresh Status"):
            st.session_state.system_validated = False
            st.rerun()


def render_error(session: ExtractionSession):
    if session.error:
        st.error(f"**Error:** {session.error}")


def render_upload_section(session: ExtractionSession):
    """Render the file selection section."""
    st.header("1. Upload Invoices")

    with st.form("upload_form", clear_on_submit=True):
        uploaded_files = st.file_uploader(
            "Select invoice images",
            type=IMAGE_TYPES,
            accept_multiple_files=True,
            help=f"Up to {session.selection.max_files} images (PNG, JPG, etc.)",
        )
        submitted = st.form_submit_button("➕ Add to batch", disabled=session.busy)

    if submitted and uploaded_files:
        session.add_files(SelectedFile.from_upload(f) for f in uploaded_files)

    files = session.files
    if not files:
        st.caption("Select one or more invoice files (PNG, JPG, etc.)")
        return

    st.caption(f"{len(files)} of {session.selection.max_files} file(s) selected.")
    for file in files:
        col1, col2 = st.columns([5, 1])
        with col1:
            st.text(f"{file.name} ({file.size:,} bytes)")
        with col2:
            if st.button("✖", key=f"remove_{file.name}_{file.size}", disabled=session.busy):
                session.remove_file(file.name, file.size)
                st.rerun()


def render_process_section(session: ExtractionSession):
    """Render the process trigger."""
    if st.button(
        "Processing..." if session.busy else "🔍 Extract Data from Invoices",
        type="primary",
        use_container_width=True,
        disabled=session.busy or not session.files,
    ):
        with st.spinner("Analyzing invoices with AI... This may take a moment."):
            asyncio.run(session.process())


def render_results_section(session: ExtractionSession):
    """Render the results table and download button."""
    if not session.records and not session.error:
        st.info("No data extracted yet. Please upload and process invoices.")
        return

    st.header("2. Extracted Data")

    if session.records:
        df = pd.DataFrame([r.to_display_row() for r in session.records])
        st.dataframe(df, use_container_width=True, hide_index=True)

        if session.download is not None:
            st.download_button(
                "⬇️ Download Excel",
                data=session.download,
                file_name=session.config.export_file_name,
                mime=XLSX_MIME,
            )


def main():
    """Main application entry point."""
    st.set_page_config(
        page_title="Invoice Data Extractor",
        page_icon="📄",
        layout="centered",
    )

    init_session_state()
    session = st.session_state.extraction

    st.title("📄 Invoice Data Extractor")
    st.markdown("Upload invoice images, extract key info with AI, and export to Excel.")

    validate_system()
    render_sidebar()

    st.divider()
    render_upload_section(session)
    render_process_section(session)
    render_error(session)

    st.divider()
    render_results_section(session)


if __name__ == "__main__":
    main()
