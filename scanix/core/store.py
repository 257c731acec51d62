"""Scan store: page ordering rules on top of the SQLite database.

Every page of a scan carries an ``order_index``. After each operation the
indexes of a scan are exactly ``0..N-1``. A scan left without pages is
deleted. Each mutation is written to the database before the call returns;
write failures are logged and otherwise ignored, so the objects held by the
caller can be ahead of what is on disk.
"""

import logging
import sqlite3
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional

from .images import DEFAULT_JPEG_QUALITY, encode_page_image
from .models import Page, Scan
from .names import generate_random_name
from ..export.pdf import PdfExporter
from ..storage.database import ScanDatabase

logger = logging.getLogger(__name__)


class StoreEvent(Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


Subscriber = Callable[[StoreEvent, Scan], None]


class ScanStore:
    """Creates, reorders and deletes scans and their pages."""

    def __init__(
        self,
        database: ScanDatabase,
        exporter: Optional[PdfExporter] = None,
        name_generator: Callable[[], str] = generate_random_name,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ):
        self.database = database
        self.exporter = exporter or PdfExporter()
        self.name_generator = name_generator
        self.jpeg_quality = jpeg_quality
        self._subscribers: list[Subscriber] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(event, scan)`` after every applied mutation.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: StoreEvent, scan: Scan) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event, scan)
            except Exception:
                logger.exception("Subscriber %r failed on %s of scan %s", callback, event.value, scan.id)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _persist(self, scan: Scan) -> bool:
        try:
            self.database.save_scan(scan)
        except sqlite3.Error:
            logger.exception("Could not save scan %s", scan.id)
            return False
        return True

    def _remove(self, scan: Scan) -> bool:
        try:
            return self.database.delete_scan(scan.id)
        except sqlite3.Error:
            logger.exception("Could not delete scan %s", scan.id)
            return False

    def _is_live(self, scan: Scan) -> bool:
        """True if ``scan`` still has pages and is still in the database.

        A handle kept after its scan was deleted, directly or by removing its
        last page, must not write the scan back.
        """
        if not scan.pages:
            logger.debug("Ignoring scan %s: it has no pages", scan.id)
            return False
        try:
            stored = self.database.exists(scan.id)
        except sqlite3.Error:
            logger.exception("Could not look up scan %s", scan.id)
            return False
        if not stored:
            logger.debug("Ignoring scan %s: it is no longer stored", scan.id)
        return stored

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_scan(self, scan_id: str) -> Optional[Scan]:
        try:
            return self.database.get_scan(scan_id)
        except sqlite3.Error:
            logger.exception("Could not load scan %s", scan_id)
            return None

    def list_scans(self, search: str = "") -> list[Scan]:
        """Scans whose name contains ``search`` (case-insensitive), newest first."""
        try:
            scans = self.database.list_scans()
        except sqlite3.Error:
            logger.exception("Could not list scans")
            return []
        return [scan for scan in scans if scan.matches(search)]

    def recent_scans(self, limit: int = 5) -> list[Scan]:
        """The ``limit`` most recently created scans."""
        return self.list_scans()[:limit]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _make_pages(self, images: Iterable[bytes], start: int) -> list[Page]:
        """Build pages for decodable blobs, numbered from ``start`` in input order."""
        pages = []
        for position, blob in enumerate(images):
            data = encode_page_image(blob, quality=self.jpeg_quality)
            if data is None:
                logger.warning("Dropping captured image %d: not a decodable image", position)
                continue
            pages.append(Page(image_data=data, order_index=start + len(pages)))
        return pages

    def append(self, scan: Optional[Scan], images: Iterable[bytes]) -> Optional[Scan]:
        """Add captured images as pages.

        With ``scan=None`` a new, generated-name scan is created, unless no
        image yields a page (an empty capture is a cancelled one); then
        nothing is created and None is returned. Undecodable images are
        dropped. A scan that was already deleted is returned unchanged.

        Returns:
            The created or extended scan
        """
        images = list(images)

        if scan is None:
            if not images:
                logger.debug("Empty capture, no scan created")
                return None
            pages = self._make_pages(images, start=0)
            if not pages:
                logger.warning("None of the %d captured image(s) could be decoded", len(images))
                return None
            scan = Scan(name=self.name_generator(), pages=pages)
            self._persist(scan)
            logger.info("Created scan %s (%r) with %d page(s)", scan.id, scan.name, len(pages))
            self._notify(StoreEvent.CREATED, scan)
            return scan

        if not self._is_live(scan):
            return scan

        pages = self._make_pages(images, start=scan.page_count)
        scan.pages.extend(pages)
        self._persist(scan)
        if pages:
            logger.info("Added %d page(s) to scan %s", len(pages), scan.id)
            self._notify(StoreEvent.UPDATED, scan)
        return scan

    def delete_page(self, scan: Scan, page_id: str) -> bool:
        """Remove a page and renumber the rest in their current order.

        Removing the last page deletes the scan. Returns False if the scan
        has no page with that id or was already deleted.
        """
        page = scan.find_page(page_id)
        if page is None or not self._is_live(scan):
            return False

        scan.pages.remove(page)
        for index, remaining in enumerate(scan.sorted_pages):
            remaining.order_index = index

        if not self.prune_if_empty(scan):
            self._persist(scan)
            self._notify(StoreEvent.UPDATED, scan)
        return True

    def move_page(self, scan: Scan, page_id: str, direction: int) -> bool:
        """Swap a page with its neighbour one step up (-1) or down (+1).

        Only the two pages' order indexes are exchanged. Moving past either
        end, or an unknown page id, changes nothing and returns False.
        """
        if direction not in (-1, 1):
            raise ValueError(f"direction must be -1 or 1, got {direction!r}")

        pages = scan.sorted_pages
        current = next((i for i, page in enumerate(pages) if page.id == page_id), None)
        if current is None:
            return False

        target = current + direction
        if target < 0 or target >= len(pages) or not self._is_live(scan):
            return False

        page, other = pages[current], pages[target]
        page.order_index, other.order_index = other.order_index, page.order_index

        self._persist(scan)
        self._notify(StoreEvent.UPDATED, scan)
        return True

    def rename(self, scan: Scan, new_name: str) -> bool:
        """Set the display name. Any string is accepted, including "".

        Returns False, leaving the scan untouched, if it was already deleted.
        """
        if not self._is_live(scan):
            return False
        scan.name = new_name
        self._persist(scan)
        self._notify(StoreEvent.UPDATED, scan)
        return True

    def delete_scan(self, scan: Scan) -> bool:
        """Delete a scan and all of its pages. Returns False if it was not stored."""
        if not self._remove(scan):
            return False
        logger.info("Deleted scan %s", scan.id)
        self._notify(StoreEvent.DELETED, scan)
        return True

    def prune_if_empty(self, scan: Scan) -> bool:
        """Delete the scan if it has no pages left. Returns True if it was empty."""
        if scan.pages:
            return False
        self.delete_scan(scan)
        return True

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self, scan: Scan, output_dir: Optional[str | Path] = None) -> Optional[Path]:
        """Export the scan as a PDF; None if it has no decodable page."""
        exporter = self.exporter if output_dir is None else PdfExporter(output_dir)
        return exporter.export_scan(scan)


def selection_after_move(selected: int, current: int, target: int) -> int:
    """Index of the viewed page after the pages at ``current`` and ``target`` swap.

    The selection follows the page it was on, whichever of the two it was.
    """
    if selected == current:
        return target
    if selected == target:
        return current
    return selected
