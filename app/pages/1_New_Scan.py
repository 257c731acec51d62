"""
New Scan Page

Creates a scan from uploaded page images, in upload order.
"""
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import streamlit as st

from scanix.config import load_settings
from scanix.core.store import ScanStore
from scanix.export.pdf import PdfExporter
from scanix.storage.database import ScanDatabase

ROOT = Path(__file__).parent.parent.parent

st.set_page_config(page_title="New Scan", page_icon="📷", layout="wide")


@st.cache_resource
def get_store():
    """Initialize the scan store."""
    settings = load_settings()
    return ScanStore(
        ScanDatabase(ROOT / settings.database_path),
        exporter=PdfExporter(ROOT / settings.export_dir),
        jpeg_quality=settings.jpeg_quality,
    )


st.title("New Scan")

uploaded_files = st.file_uploader(
    "Choose page images, in page order",
    type=["jpg", "jpeg", "png", "gif", "bmp", "webp", "tiff"],
    accept_multiple_files=True,
)

if uploaded_files and st.button("Create Scan", type="primary"):
    store = get_store()
    blobs = [f.getvalue() for f in uploaded_files]
    scan = store.append(None, blobs)

    if scan is None:
        st.error("None of the uploaded files could be read as an image. No scan was created.")
    else:
        dropped = len(blobs) - scan.page_count
        st.success(f"Created **{scan.name}** with {scan.page_count} page(s)")
        if dropped:
            st.warning(f"Skipped {dropped} file(s) that could not be read")
        st.session_state["selected_scan_id"] = scan.id
        st.page_link("pages/2_Scan_Detail.py", label="Open scan", icon="📄")
