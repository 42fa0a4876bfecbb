"""
Document Store - the whole-store snapshot behind every operation.

The entire data set lives in one JSON document:

{
  "categories": [...],
  "networks": [...],
  "articles": [...],
  "notifications": [...]
}

Every logical operation does one ``read()``, works on the in-memory
``Database`` and does at most one ``write()``. There is no caching,
locking or transaction log: two writers racing between read and write
lose updates (last write wins).
"""

import os
import tempfile
from pathlib import Path

from editorial.core.config import settings, get_logger
from editorial.core.types import Database

logger = get_logger("storage.document")


class DocumentStore:
    """Read and write the whole editorial document as one unit."""

    def __init__(self, path: Path | str | None = None):
        """Initialize the store. Nothing touches disk until read/write."""
        self.path = Path(path) if path is not None else settings.data_file

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Database:
        """Load the full document. A missing file is an empty database."""
        if not self.path.exists():
            logger.debug(f"No store at {self.path}, starting empty")
            return Database()

        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return Database()

        db = Database.model_validate_json(raw)
        logger.debug(
            f"Read store {self.path}: {len(db.articles)} articles, "
            f"{len(db.categories)} categories, {len(db.networks)} networks"
        )
        return db

    def write(self, db: Database) -> None:
        """Replace the full document atomically (temp file + rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = db.model_dump_json(by_alias=True, indent=2)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Wrote store {self.path}")

    def initialize(self) -> bool:
        """Create an empty document if none exists. Returns True if created."""
        if self.exists():
            return False
        self.write(Database())
        logger.info(f"Initialized empty store at {self.path}")
        return True
