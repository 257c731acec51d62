"""Photo library writer.

The library is a plain directory. Writes are fire-and-forget: failures are
logged and never reach the caller.
"""

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..core.images import load_image, to_rgb
from ..core.models import Scan

logger = logging.getLogger(__name__)


class PhotoLibrary:
    """Saves page images as JPEG files into a library directory."""

    def __init__(self, directory: str | Path = "data/photos", quality: int = 90):
        self.directory = Path(directory)
        self.quality = quality

    def save_image(self, data: Optional[bytes]) -> Optional[Path]:
        """Save one image. Returns the written path, or None if nothing was saved."""
        img = load_image(data)
        if img is None:
            logger.warning("Not saving to photo library: image could not be decoded")
            return None

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = self.directory / f"IMG_{stamp}_{uuid.uuid4().hex[:8]}.jpg"
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            to_rgb(img).save(path, format="JPEG", quality=self.quality)
        except OSError as e:
            logger.error("Could not save image to %s: %s", path, e)
            return None

        logger.debug("Saved image to %s", path)
        return path

    def save_page(self, scan: Scan, index: int) -> Optional[Path]:
        """Save the page at ``index`` in page order. Out of range is a no-op."""
        pages = scan.sorted_pages
        if not 0 <= index < len(pages):
            return None
        return self.save_image(pages[index].image_data)

    def save_all(self, scan: Scan) -> list[Path]:
        """Save every decodable page of a scan, in page order."""
        saved = []
        for page in scan.sorted_pages:
            if page.image_data is None:
                continue
            path = self.save_image(page.image_data)
            if path is not None:
                saved.append(path)
        return saved
