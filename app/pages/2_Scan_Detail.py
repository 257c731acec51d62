"""
Scan Detail Page

Page viewer with reordering, page deletion, adding pages, renaming,
PDF export and saving to the photo library.
"""
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import streamlit as st

from scanix.config import load_settings
from scanix.core.images import make_thumbnail
from scanix.core.store import ScanStore, selection_after_move
from scanix.export.pdf import PdfExporter
from scanix.export.photos import PhotoLibrary
from scanix.storage.database import ScanDatabase

ROOT = Path(__file__).parent.parent.parent

st.set_page_config(page_title="Scan Detail", page_icon="📄", layout="wide")


@st.cache_resource
def get_store():
    """Initialize the scan store."""
    settings = load_settings()
    return ScanStore(
        ScanDatabase(ROOT / settings.database_path),
        exporter=PdfExporter(ROOT / settings.export_dir),
        jpeg_quality=settings.jpeg_quality,
    )


@st.cache_resource
def get_photo_library():
    return PhotoLibrary(ROOT / load_settings().photos_dir)


store = get_store()
scans = store.list_scans()

if not scans:
    st.title("Scan Detail")
    st.info("No scans yet.")
    st.stop()

scan_ids = [s.id for s in scans]
selected_id = st.session_state.get("selected_scan_id")
index = scan_ids.index(selected_id) if selected_id in scan_ids else 0

choice = st.sidebar.selectbox(
    "Scan",
    options=scan_ids,
    index=index,
    format_func=lambda sid: next(s.name or "Untitled" for s in scans if s.id == sid),
)
st.session_state["selected_scan_id"] = choice
scan = store.get_scan(choice)
if scan is None:
    st.error("This scan no longer exists.")
    st.stop()

pages = scan.sorted_pages
page_index = min(st.session_state.get("page_index", 0), len(pages) - 1)

st.title(scan.name or "Untitled")
st.caption(f"{scan.page_count} page(s) · created {scan.created_at.strftime('%b %d, %Y at %H:%M')}")

viewer, sidebar = st.columns([3, 2])

with viewer:
    current = pages[page_index]
    if current.image_data is not None:
        st.image(current.image_data)
    else:
        st.warning("This page's image could not be loaded.")
    st.caption(f"{page_index + 1} of {len(pages)}")

with sidebar:
    st.subheader("Pages")
    for i, page in enumerate(pages):
        c_thumb, c_up, c_down, c_view, c_del = st.columns([2, 1, 1, 1, 1])
        with c_thumb:
            thumb = make_thumbnail(page.image_data, 80)
            if thumb:
                st.image(thumb)
            else:
                st.markdown(f"Page {i + 1}")
        with c_up:
            if st.button("↑", key=f"up_{page.id}", disabled=i == 0):
                if store.move_page(scan, page.id, -1):
                    st.session_state["page_index"] = selection_after_move(page_index, i, i - 1)
                st.rerun()
        with c_down:
            if st.button("↓", key=f"down_{page.id}", disabled=i == len(pages) - 1):
                if store.move_page(scan, page.id, 1):
                    st.session_state["page_index"] = selection_after_move(page_index, i, i + 1)
                st.rerun()
        with c_view:
            if st.button("View", key=f"view_{page.id}"):
                st.session_state["page_index"] = i
                st.rerun()
        with c_del:
            if st.button("🗑", key=f"del_{page.id}"):
                store.delete_page(scan, page.id)
                if page_index >= scan.page_count and page_index > 0:
                    st.session_state["page_index"] = page_index - 1
                if not scan.pages:
                    st.session_state.pop("selected_scan_id", None)
                    st.switch_page("app.py")
                st.rerun()

    st.divider()
    added = st.file_uploader(
        "Add pages",
        type=["jpg", "jpeg", "png", "gif", "bmp", "webp", "tiff"],
        accept_multiple_files=True,
        key=f"add_{scan.id}",
    )
    if added and st.button("Add to scan"):
        store.append(scan, [f.getvalue() for f in added])
        st.rerun()

st.divider()
col_rename, col_export, col_delete = st.columns(3)

with col_rename:
    with st.form("rename"):
        new_name = st.text_input("Name", value=scan.name)
        if st.form_submit_button("Rename"):
            store.rename(scan, new_name)
            st.rerun()

with col_export:
    st.markdown("**Export**")
    if st.button("Export as PDF"):
        pdf_path = store.export(scan)
        if pdf_path is None:
            st.error("This scan has no pages that can be exported.")
        else:
            st.download_button(
                "Download PDF",
                data=pdf_path.read_bytes(),
                file_name=pdf_path.name,
                mime="application/pdf",
            )
    library = get_photo_library()
    if st.button("Save current page to Photos"):
        library.save_page(scan, page_index)
        st.toast(f"Saved to {library.directory}")
    if st.button("Save all pages to Photos"):
        library.save_all(scan)
        st.toast(f"Saved to {library.directory}")

with col_delete:
    st.markdown("**Delete this scan?**")
    confirm = st.checkbox("This action cannot be undone.")
    if st.button("Delete scan", type="primary", disabled=not confirm):
        store.delete_scan(scan)
        st.session_state.pop("selected_scan_id", None)
        st.switch_page("app.py")
