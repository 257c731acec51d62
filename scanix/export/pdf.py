"""Multi-page PDF export of scans.

Each decodable page becomes one PDF page; Pillow does the PDF encoding.
"""

import logging
import re
import time
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image

from ..core.images import load_image, to_rgb
from ..core.models import Scan

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def safe_file_name(name: str) -> str:
    """Replace characters that can't appear in a file name."""
    return _UNSAFE_CHARS.sub("_", name).strip() or "Scan"


def scan_images(scan: Scan) -> list[Image.Image]:
    """Decodable page images of a scan, in page order."""
    images = []
    for page in scan.sorted_pages:
        img = load_image(page.image_data)
        if img is None:
            logger.debug("Skipping page %s of scan %s: no decodable image", page.id, scan.id)
            continue
        images.append(img)
    return images


class PdfExporter:
    """Writes scans to PDF files in an output directory."""

    def __init__(self, output_dir: str | Path = "data/exports", resolution: float = 150.0):
        self.output_dir = Path(output_dir)
        self.resolution = resolution

    def create_pdf(self, images: Sequence[Image.Image], file_name: str) -> Optional[Path]:
        """Create a PDF with one page per image.

        Args:
            images: Page images in output order
            file_name: File name without the .pdf extension

        Returns:
            Path of the written PDF, or None if there is nothing to write or
            the file could not be written
        """
        if not images:
            return None

        self.output_dir.mkdir(parents=True, exist_ok=True)
        pdf_path = self.output_dir / f"{safe_file_name(file_name)}.pdf"

        # Replace a previous export of the same name
        pdf_path.unlink(missing_ok=True)

        pages = [to_rgb(img) for img in images]
        try:
            pages[0].save(
                pdf_path,
                "PDF",
                resolution=self.resolution,
                save_all=True,
                append_images=pages[1:],
            )
        except (OSError, ValueError) as e:
            logger.error("Could not write PDF %s: %s", pdf_path, e)
            return None

        logger.info("Exported %d page(s) to %s", len(pages), pdf_path)
        return pdf_path

    def export_scan(self, scan: Scan) -> Optional[Path]:
        """Export a scan's pages as one PDF.

        Pages without a decodable image are skipped. Returns None when no
        page is left to export.
        """
        images = scan_images(scan)
        if not images:
            logger.warning("Scan %s has no exportable pages", scan.id)
            return None

        file_name = scan.name if scan.name else f"Scan_{int(time.time())}"
        return self.create_pdf(images, file_name)
