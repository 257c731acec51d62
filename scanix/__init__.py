"""Scanix - Scan paper documents into ordered, named page collections.

Package structure:
    scanix/
    ├── cli.py              # Command-line interface
    ├── config.py           # Settings from YAML and environment
    ├── log_config.py       # Console logging setup
    ├── core/               # Core business logic
    │   ├── models.py       # Data models (Scan, Page)
    │   ├── names.py        # Random scan names
    │   ├── images.py       # Page image decoding and encoding
    │   └── store.py        # Page ordering and persistence rules
    ├── storage/            # Data persistence
    │   └── database.py     # SQLite scan and page storage
    └── export/             # Export collaborators
        ├── pdf.py          # Multi-page PDF export
        └── photos.py       # Photo library writer
"""

__version__ = "0.1.0"

from .core.models import Page, Scan
from .core.names import generate_name_with_date, generate_random_name
from .core.store import ScanStore, StoreEvent
from .storage.database import ScanDatabase
from .export.pdf import PdfExporter
from .export.photos import PhotoLibrary
from .config import ConfigError, Settings, load_settings

__all__ = [
    # Core
    "Page",
    "Scan",
    "ScanStore",
    "StoreEvent",
    "generate_random_name",
    "generate_name_with_date",
    # Storage
    "ScanDatabase",
    # Export
    "PdfExporter",
    "PhotoLibrary",
    # Config
    "ConfigError",
    "Settings",
    "load_settings",
]
