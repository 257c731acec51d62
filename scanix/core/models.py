"""Data models for scans and their pages."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Page:
    """One captured image within a scan."""

    image_data: Optional[bytes]  # None marks an unloadable page
    order_index: int
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def has_image(self) -> bool:
        return self.image_data is not None


@dataclass
class Scan:
    """A named group of pages. Page order comes from ``Page.order_index``,
    never from the position of a page in ``pages``."""

    name: str = ""
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    pages: list[Page] = field(default_factory=list)

    @property
    def sorted_pages(self) -> list[Page]:
        return sorted(self.pages, key=lambda page: page.order_index)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def thumbnail_page(self) -> Optional[Page]:
        pages = self.sorted_pages
        return pages[0] if pages else None

    def find_page(self, page_id: str) -> Optional[Page]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def matches(self, text: str) -> bool:
        """Case-insensitive name search; empty text matches every scan."""
        if not text:
            return True
        return text.casefold() in self.name.casefold()
