"""
Prescription PDF storage.
Generated and uploaded PDFs share one flat directory; the file name is the only identifier.
"""
import hashlib
import logging
import os
import random
import time
from typing import Optional

from ..core.config import settings
from ..core.errors import StorageError

logger = logging.getLogger(__name__)


class PdfStorageService:
    """Store prescription PDFs on the local filesystem."""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = base_dir or settings.PRESCRIPTIONS_DIR

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def save(self, filename: str, data: bytes) -> dict:
        """Write ``data`` under ``filename`` and return ``{"filename", "path", "file_hash"}``."""
        if not self._is_plain_name(filename):
            raise StorageError(f"Invalid file name: {filename}")
        path = os.path.join(self.base_dir, filename)
        try:
            os.makedirs(self.base_dir, exist_ok=True)
            with open(path, "wb") as fh:
                fh.write(data)
        except OSError as exc:
            logger.exception("PDF write failed for %s", path)
            raise StorageError() from exc

        logger.info("PDF saved: %s", path)
        return {
            "filename": filename,
            "path": path,
            "file_hash": hashlib.sha256(data).hexdigest(),
        }

    def save_upload(self, data: bytes, original_name: Optional[str]) -> dict:
        """Store an uploaded file under a generated ``custom_<ms>-<random><ext>`` name."""
        result = self.save(self.upload_file_name(original_name), data)
        result["original_name"] = original_name
        return result

    def resolve(self, filename: str) -> Optional[str]:
        """Path of a stored file, or None if absent or not a plain file name."""
        if not self._is_plain_name(filename):
            return None
        path = os.path.join(self.base_dir, filename)
        return path if os.path.isfile(path) else None

    def delete(self, filename: str) -> bool:
        """Remove a stored file. Returns False when there was nothing to remove."""
        path = self.resolve(filename)
        if path is None:
            return False
        try:
            os.remove(path)
        except OSError:
            logger.exception("PDF delete failed for %s", path)
            return False
        logger.info("PDF deleted: %s", path)
        return True

    @staticmethod
    def upload_file_name(original_name: Optional[str]) -> str:
        ext = os.path.splitext(original_name or "")[1]
        suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}"
        return f"custom_{suffix}{ext}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _is_plain_name(filename: str) -> bool:
        if not filename or filename in (".", ".."):
            return False
        return "/" not in filename and "\\" not in filename


pdf_storage = PdfStorageService()
