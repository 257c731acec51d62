import io
import random
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add the repository root to sys.path so we can import scanix
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())

from scanix.core.store import ScanStore
from scanix.export.pdf import PdfExporter
from scanix.storage.database import ScanDatabase


def make_image_bytes(width: int = 40, height: int = 30, color="white", fmt: str = "PNG") -> bytes:
    """Encode a solid-colour test image."""
    img = Image.new("RGB", (width, height), color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def image_width(data: bytes) -> int:
    with Image.open(io.BytesIO(data)) as img:
        return img.size[0]


def assert_dense_order(scan):
    """Order indexes of a scan are exactly 0..N-1."""
    assert sorted(p.order_index for p in scan.pages) == list(range(len(scan.pages)))


@pytest.fixture
def db(tmp_path: Path) -> ScanDatabase:
    return ScanDatabase(tmp_path / "scans.db")


@pytest.fixture
def store(db, tmp_path: Path) -> ScanStore:
    """Store with a fixed name generator and a temporary export directory."""
    return ScanStore(
        db,
        exporter=PdfExporter(tmp_path / "exports"),
        name_generator=lambda: "Test Scan",
    )


@pytest.fixture
def blobs() -> list[bytes]:
    """Three decodable images told apart by their widths (10, 20, 30 px)."""
    return [make_image_bytes(width=10 * (i + 1)) for i in range(3)]


@pytest.fixture
def scan(store, blobs):
    """A stored scan with three pages."""
    return store.append(None, blobs)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
