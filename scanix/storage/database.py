"""SQLite database layer for scans and pages."""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from ..core.models import Page, Scan


class ScanDatabase:
    """Manages scan and page storage in SQLite.

    Each scan owns its page rows; deleting a scan row cascades to its pages.
    """

    def __init__(self, db_path: str | Path = "data/scans.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection with foreign keys on; commit on success."""
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self):
        """Create the scans and pages tables if they don't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS scans (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL DEFAULT '',
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS pages (
                    id TEXT PRIMARY KEY,
                    scan_id TEXT NOT NULL REFERENCES scans(id) ON DELETE CASCADE,
                    order_index INTEGER NOT NULL,
                    image_data BLOB,
                    created_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_pages_scan ON pages(scan_id)")

    def save_scan(self, scan: Scan) -> None:
        """Insert or update a scan together with its current pages.

        Stored pages that are no longer part of the scan are removed.
        Raises sqlite3.Error if the write fails; nothing is committed then.
        """
        with self._connect() as conn:
            # INSERT OR REPLACE would delete the old row and cascade to the pages
            conn.execute("""
                INSERT INTO scans (id, name, created_at) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET name = excluded.name
            """, (scan.id, scan.name, scan.created_at.isoformat()))

            conn.executemany("""
                INSERT INTO pages (id, scan_id, order_index, image_data, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    order_index = excluded.order_index,
                    image_data = excluded.image_data
            """, [
                (page.id, scan.id, page.order_index, page.image_data, page.created_at.isoformat())
                for page in scan.pages
            ])

            current = {page.id for page in scan.pages}
            stored = conn.execute("SELECT id FROM pages WHERE scan_id = ?", (scan.id,))
            stale = [(row[0],) for row in stored.fetchall() if row[0] not in current]
            conn.executemany("DELETE FROM pages WHERE id = ?", stale)

    def _row_to_page(self, row) -> Page:
        """Convert a pages row (id, order_index, image_data, created_at) to a Page."""
        return Page(
            id=row[0],
            order_index=row[1],
            image_data=bytes(row[2]) if row[2] is not None else None,
            created_at=datetime.fromisoformat(row[3]),
        )

    def _load_pages(self, conn: sqlite3.Connection, scan_id: str) -> list[Page]:
        cursor = conn.execute(
            "SELECT id, order_index, image_data, created_at FROM pages "
            "WHERE scan_id = ? ORDER BY order_index",
            (scan_id,)
        )
        return [self._row_to_page(row) for row in cursor.fetchall()]

    def _row_to_scan(self, conn: sqlite3.Connection, row) -> Scan:
        return Scan(
            id=row[0],
            name=row[1],
            created_at=datetime.fromisoformat(row[2]),
            pages=self._load_pages(conn, row[0]),
        )

    def get_scan(self, scan_id: str) -> Optional[Scan]:
        """Retrieve a scan and its pages by id (exact match)."""
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, created_at FROM scans WHERE id = ?",
                (scan_id,)
            )
            row = cursor.fetchone()
            if row:
                return self._row_to_scan(conn, row)
            return None

    def find_ids_by_prefix(self, id_prefix: str) -> list[str]:
        """Find all scan ids starting with the given prefix."""
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT id FROM scans WHERE id LIKE ? ORDER BY id",
                (id_prefix + "%",)
            )
            return [row[0] for row in cursor.fetchall()]

    def list_scans(self) -> list[Scan]:
        """List all scans, newest first."""
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, created_at FROM scans ORDER BY created_at DESC"
            )
            return [self._row_to_scan(conn, row) for row in cursor.fetchall()]

    def exists(self, scan_id: str) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM scans WHERE id = ?", (scan_id,)).fetchone()
            return row is not None

    def delete_scan(self, scan_id: str) -> bool:
        """Delete a scan and its pages. Returns True if deleted."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM scans WHERE id = ?", (scan_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        """Return the number of scans in the database."""
        with self._connect() as conn:
            cursor = conn.execute("SELECT COUNT(*) FROM scans")
            return cursor.fetchone()[0]

    def page_count(self) -> int:
        """Return the number of pages across all scans."""
        with self._connect() as conn:
            cursor = conn.execute("SELECT COUNT(*) FROM pages")
            return cursor.fetchone()[0]
