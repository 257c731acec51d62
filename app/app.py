"""
Scanix - Streamlit App

Root page: the most recent scans, then all scans newest first, with name search.
"""
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()
# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st

from scanix.config import load_settings
from scanix.core.images import make_thumbnail
from scanix.core.store import ScanStore
from scanix.export.pdf import PdfExporter
from scanix.storage.database import ScanDatabase

ROOT = Path(__file__).parent.parent
RECENT_LIMIT = 5

st.set_page_config(page_title="Scanix", page_icon="📄", layout="wide")


@st.cache_resource
def get_store():
    """Initialize the scan store."""
    settings = load_settings()
    return ScanStore(
        ScanDatabase(ROOT / settings.database_path),
        exporter=PdfExporter(ROOT / settings.export_dir),
        jpeg_quality=settings.jpeg_quality,
    )


st.title("Scanix")

settings = load_settings()
store = get_store()
search = st.text_input("Search scans", placeholder="Search scans")
scans = store.list_scans(search)

if not scans:
    if search:
        st.info("No results. Try a different search term.")
    else:
        st.info("No scans yet. Use **New Scan** in the sidebar to add your first document.")
    st.stop()


def open_scan(scan_id):
    st.session_state["selected_scan_id"] = scan_id
    st.switch_page("pages/2_Scan_Detail.py")


if not search:
    recent = store.recent_scans(RECENT_LIMIT)
    st.subheader("Recent Scans")
    for col, scan in zip(st.columns(RECENT_LIMIT), recent):
        with col:
            page = scan.thumbnail_page
            thumb = make_thumbnail(page.image_data, settings.thumbnail_size) if page else None
            if thumb:
                st.image(thumb)
            else:
                st.markdown("📄")
            if st.button(scan.name or "Untitled", key=f"recent_{scan.id}"):
                open_scan(scan.id)

st.subheader("Search Results" if search else "All Scans")
st.caption(f"{len(scans)} scan(s)")

for scan in scans:
    col_thumb, col_info, col_open = st.columns([1, 5, 1])
    with col_thumb:
        page = scan.thumbnail_page
        thumb = make_thumbnail(page.image_data, settings.thumbnail_size) if page else None
        if thumb:
            st.image(thumb, width=96)
        else:
            st.markdown("📄")
    with col_info:
        st.markdown(f"**{scan.name or 'Untitled'}**")
        st.caption(
            f"{scan.page_count} page(s) · {scan.created_at.strftime('%b %d, %Y %H:%M')}"
        )
    with col_open:
        if st.button("Open", key=f"open_{scan.id}"):
            open_scan(scan.id)
