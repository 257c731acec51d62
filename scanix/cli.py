"""Command-line interface for the scan library.

Environment variables:
    SCANIX_DATABASE, SCANIX_EXPORT_DIR, SCANIX_PHOTOS_DIR,
    SCANIX_JPEG_QUALITY, SCANIX_LOG_LEVEL (see scanix.config)
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

from .config import ConfigError, Settings, load_settings
from .core.models import Page, Scan
from .core.store import ScanStore
from .export.pdf import PdfExporter
from .export.photos import PhotoLibrary
from .log_config import setup_logging
from .storage.database import ScanDatabase

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tiff", ".tif"}

MOVE_DIRECTIONS = {"up": -1, "down": 1}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def is_image(filepath: Path) -> bool:
    """Check if a file is an image based on extension."""
    return filepath.suffix.lower() in IMAGE_EXTENSIONS


def collect_image_files(paths: list[str]) -> list[Path]:
    """Expand arguments into image files, keeping argument order.

    Directories contribute their image files sorted by name.
    """
    files = []
    for arg in paths:
        path = Path(arg)
        if path.is_dir():
            files.extend(sorted(p for p in path.iterdir() if p.is_file() and is_image(p)))
        elif path.is_file():
            files.append(path)
        else:
            print(f"Warning: {path} does not exist, skipping")
    return files


def read_capture(paths: list[str]) -> list[bytes]:
    """Read image files as one capture session, in order."""
    blobs = []
    for filepath in tqdm(collect_image_files(paths), desc="Reading", disable=None):
        try:
            blobs.append(filepath.read_bytes())
        except OSError as e:
            tqdm.write(f"Warning: Could not read {filepath}: {e}")
    return blobs


def open_store(args) -> ScanStore:
    settings: Settings = args.settings
    db_path = args.database or settings.database_path
    return ScanStore(
        ScanDatabase(db_path),
        exporter=PdfExporter(settings.export_dir),
        jpeg_quality=settings.jpeg_quality,
    )


def resolve_scan(store: ScanStore, scan_id: str) -> Scan:
    """Find a scan by full id or unique id prefix, or exit with an error."""
    matches = store.database.find_ids_by_prefix(scan_id)
    if scan_id in matches:
        matches = [scan_id]
    if not matches:
        print(f"Error: No scan found matching: {scan_id}")
        sys.exit(1)
    if len(matches) > 1:
        print(f"Error: '{scan_id}' matches {len(matches)} scans, use a longer prefix")
        sys.exit(1)

    scan = store.get_scan(matches[0])
    if scan is None:
        print(f"Error: Could not load scan {matches[0]}")
        sys.exit(1)
    return scan


def resolve_page(scan: Scan, page_id: str) -> Page:
    """Find a page of a scan by full id or unique id prefix, or exit."""
    matches = [p for p in scan.sorted_pages if p.id.startswith(page_id)]
    exact = [p for p in matches if p.id == page_id]
    if exact:
        return exact[0]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        print(f"Error: Scan {scan.id[:12]} has no page matching: {page_id}")
    else:
        print(f"Error: '{page_id}' matches {len(matches)} pages, use a longer prefix")
    sys.exit(1)


def format_scan_row(scan: Scan) -> str:
    created = scan.created_at.strftime("%Y-%m-%d %H:%M")
    return f"{scan.id[:12]:<14} {scan.page_count:>5}  {created:<17} {scan.name}"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def scan_new(args):
    """Create a new scan from image files."""
    store = open_store(args)
    blobs = read_capture(args.files)

    scan = store.append(None, blobs)
    if scan is None:
        print("No pages captured, no scan created")
        sys.exit(1)

    dropped = len(blobs) - scan.page_count
    print(f"Created scan {scan.id[:12]} \"{scan.name}\" with {scan.page_count} page(s)")
    if dropped:
        print(f"Skipped {dropped} file(s) that could not be decoded")


def add_pages(args):
    """Append image files to an existing scan."""
    store = open_store(args)
    scan = resolve_scan(store, args.scan_id)
    blobs = read_capture(args.files)

    before = scan.page_count
    store.append(scan, blobs)
    added = scan.page_count - before
    print(f"Added {added} page(s) to \"{scan.name}\" ({scan.page_count} total)")
    if len(blobs) > added:
        print(f"Skipped {len(blobs) - added} file(s) that could not be decoded")


def list_scans(args):
    """List scans, newest first."""
    store = open_store(args)
    scans = store.list_scans(args.search or "")

    if not scans:
        print("No scans found" if args.search else "No scans yet")
        return

    print(f"{'ID':<14} {'Pages':>5}  {'Created':<17} Name")
    print("-" * 70)
    for scan in scans:
        print(format_scan_row(scan))
    print(f"\nTotal: {len(scans)} scan(s)")


def show_scan(args):
    """Show a scan and its pages."""
    store = open_store(args)
    scan = resolve_scan(store, args.scan_id)

    print(f"Scan:     {scan.id}")
    print(f"  Name:     {scan.name or '(untitled)'}")
    print(f"  Created:  {scan.created_at.strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"  Pages:    {scan.page_count}")
    print()
    for page in scan.sorted_pages:
        size = f"{len(page.image_data):>9} B" if page.image_data is not None else "  missing"
        print(f"  {page.order_index + 1:>3}. {page.id[:12]}  {size}")


def rename_scan(args):
    store = open_store(args)
    scan = resolve_scan(store, args.scan_id)
    store.rename(scan, args.name)
    print(f"Renamed scan {scan.id[:12]} to \"{scan.name}\"")


def delete_scan(args):
    store = open_store(args)
    scan = resolve_scan(store, args.scan_id)
    store.delete_scan(scan)
    print(f"Deleted scan {scan.id[:12]} \"{scan.name}\"")


def delete_page(args):
    """Delete one page; deleting the last page deletes the scan."""
    store = open_store(args)
    scan = resolve_scan(store, args.scan_id)
    page = resolve_page(scan, args.page_id)

    store.delete_page(scan, page.id)
    if scan.pages:
        print(f"Deleted page {page.id[:12]}, {scan.page_count} page(s) left")
    else:
        print(f"Deleted page {page.id[:12]}; scan {scan.id[:12]} was empty and has been removed")


def move_page(args):
    store = open_store(args)
    scan = resolve_scan(store, args.scan_id)
    page = resolve_page(scan, args.page_id)

    if store.move_page(scan, page.id, MOVE_DIRECTIONS[args.direction]):
        print(f"Moved page {page.id[:12]} to position {page.order_index + 1}")
    else:
        print(f"Page {page.id[:12]} is already at the {'top' if args.direction == 'up' else 'bottom'}")


def export_scan(args):
    """Export a scan as PDF."""
    store = open_store(args)
    scan = resolve_scan(store, args.scan_id)

    pdf_path = store.export(scan, args.output)
    if pdf_path is None:
        print(f"Error: Scan {scan.id[:12]} has no exportable pages")
        sys.exit(1)
    print(f"Exported: {pdf_path}")


def save_photos(args):
    """Save one page or all pages to the photo library."""
    store = open_store(args)
    scan = resolve_scan(store, args.scan_id)
    library = PhotoLibrary(args.settings.photos_dir)

    if args.page is not None:
        path = library.save_page(scan, args.page - 1)
        saved = [path] if path else []
    else:
        saved = library.save_all(scan)

    for path in saved:
        print(f"Saved: {path}")
    print(f"\nSaved {len(saved)} image(s) to {library.directory}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scanix - scan, organize and export paper documents",
        epilog="Environment variables: SCANIX_DATABASE, SCANIX_EXPORT_DIR, SCANIX_PHOTOS_DIR",
    )
    parser.add_argument(
        "--database", "-d",
        default=None,
        help="Path to SQLite database (default: data/scans.db)",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to YAML config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- scan ---
    scan_parser = subparsers.add_parser("scan", help="Create a new scan from image files")
    scan_parser.add_argument("files", nargs="+", help="Image files or directories, in page order")
    scan_parser.set_defaults(func=scan_new)

    # --- add-pages ---
    add_parser = subparsers.add_parser("add-pages", help="Append image files to a scan")
    add_parser.add_argument("scan_id", help="Scan id or unique prefix")
    add_parser.add_argument("files", nargs="+", help="Image files or directories, in page order")
    add_parser.set_defaults(func=add_pages)

    # --- list ---
    list_parser = subparsers.add_parser("list", help="List scans, newest first")
    list_parser.add_argument("--search", "-s", default="", help="Only scans whose name contains this text")
    list_parser.set_defaults(func=list_scans)

    # --- show ---
    show_parser = subparsers.add_parser("show", help="Show a scan and its pages")
    show_parser.add_argument("scan_id", help="Scan id or unique prefix")
    show_parser.set_defaults(func=show_scan)

    # --- rename ---
    rename_parser = subparsers.add_parser("rename", help="Rename a scan")
    rename_parser.add_argument("scan_id", help="Scan id or unique prefix")
    rename_parser.add_argument("name", help="New name (may be empty)")
    rename_parser.set_defaults(func=rename_scan)

    # --- delete ---
    delete_parser = subparsers.add_parser("delete", help="Delete a scan and all its pages")
    delete_parser.add_argument("scan_id", help="Scan id or unique prefix")
    delete_parser.set_defaults(func=delete_scan)

    # --- delete-page ---
    delete_page_parser = subparsers.add_parser("delete-page", help="Delete one page of a scan")
    delete_page_parser.add_argument("scan_id", help="Scan id or unique prefix")
    delete_page_parser.add_argument("page_id", help="Page id or unique prefix")
    delete_page_parser.set_defaults(func=delete_page)

    # --- move-page ---
    move_parser = subparsers.add_parser("move-page", help="Move a page one position up or down")
    move_parser.add_argument("scan_id", help="Scan id or unique prefix")
    move_parser.add_argument("page_id", help="Page id or unique prefix")
    move_parser.add_argument("direction", choices=sorted(MOVE_DIRECTIONS))
    move_parser.set_defaults(func=move_page)

    # --- export ---
    export_parser = subparsers.add_parser("export", help="Export a scan as PDF")
    export_parser.add_argument("scan_id", help="Scan id or unique prefix")
    export_parser.add_argument("--output", "-o", default=None, help="Output directory (default: data/exports)")
    export_parser.set_defaults(func=export_scan)

    # --- save-photos ---
    photos_parser = subparsers.add_parser("save-photos", help="Save pages to the photo library")
    photos_parser.add_argument("scan_id", help="Scan id or unique prefix")
    photos_parser.add_argument("--page", "-p", type=int, default=None, help="Save only this page (1-based)")
    photos_parser.set_defaults(func=save_photos)

    return parser


def main(argv=None):
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        args.settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    setup_logging(logging.DEBUG if args.verbose else args.settings.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
