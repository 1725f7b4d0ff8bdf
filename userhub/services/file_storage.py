"""Local disk storage for uploaded files.

Files are stored under the configured upload directory and referenced by
their path relative to it:
    assets/
    └── profile/
        └── 0b7c...e1.png
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from userhub.config import Settings, settings

logger = logging.getLogger(__name__)


class FileStorageError(Exception):
    """File could not be written."""


@dataclass
class FileUpload:
    """An uploaded file, already read into memory."""

    filename: str
    content: bytes

    @property
    def extension(self) -> str:
        """Text after the last dot, or an empty string."""
        _, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot else ""


class LocalFileStorage:
    """Stores uploads on the local filesystem."""

    def __init__(self, config: Settings = settings, base_dir: str | None = None) -> None:
        self.base_dir = Path(base_dir or config.upload_dir)

    def save(self, upload: FileUpload, path: str) -> str:
        """Persist ``upload`` at ``path`` (relative to the base dir).

        Returns:
            The relative path, suitable for storing in the database.
        """
        target = (self.base_dir / path).resolve()
        if self.base_dir.resolve() not in target.parents:
            raise FileStorageError(f"invalid path: {path}")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                f.write(upload.content)
        except OSError as e:
            raise FileStorageError(f"failed to write {path}: {e}") from e

        logger.info("Saved file: %s (%d bytes)", path, len(upload.content))
        return path

    def delete(self, path: str) -> bool:
        """Delete a stored file. Returns False if it didn't exist."""
        try:
            (self.base_dir / path).unlink()
            logger.info("Deleted file: %s", path)
            return True
        except FileNotFoundError:
            logger.warning("File not found for deletion: %s", path)
            return False
