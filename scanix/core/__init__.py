"""Core business logic - data models, naming and the scan store."""

from .models import Page, Scan
from .names import generate_random_name
from .images import encode_page_image, load_image
from .store import ScanStore, StoreEvent

__all__ = [
    "Page",
    "Scan",
    "generate_random_name",
    "encode_page_image",
    "load_image",
    "ScanStore",
    "StoreEvent",
]
