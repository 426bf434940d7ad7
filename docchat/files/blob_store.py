import logging
import os
import re
import secrets
import tempfile
import time
from pathlib import Path
from docchat.errors import BlobNotFound, PayloadTooLarge, UnsupportedMediaType, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({
    "application/pdf",
    "text/plain",
    "text/markdown",
    "text/csv",
    "image/png",
    "image/jpeg",
})

_EXT_RE = re.compile(r"^\.[a-z0-9]{1,10}$")


def safe_extension(filename: str | None) -> str:
    """Extension of a client filename, or "" when it is not a plain suffix."""
    if not filename:
        return ""
    ext = os.path.splitext(os.path.basename(filename.replace("\\", "/")))[1].lower()
    return ext if _EXT_RE.match(ext) else ""


class BlobStore:
    """Raw upload bytes on local disk, addressed by a generated name."""

    def __init__(self, root: str | Path, max_bytes: int = 10 * 1024 * 1024):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.max_bytes = max_bytes

    def validate_type(self, content_type: str | None) -> None:
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise UnsupportedMediaType()

    def validate_size(self, size: int) -> None:
        if size <= 0:
            raise ValidationError("Uploaded file is empty")
        if size > self.max_bytes:
            raise PayloadTooLarge(f"File larger than {self.max_bytes // (1024 * 1024)}MB")

    def _new_name(self, extension: str) -> str:
        return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9):09d}{extension}"

    def path_for(self, stored_name: str) -> Path:
        if not stored_name or stored_name in (".", "..") or "/" in stored_name or "\\" in stored_name:
            raise BlobNotFound()
        path = (self.root / stored_name).resolve()
        if path.parent != self.root:
            raise BlobNotFound()
        return path

    def save(self, data: bytes, extension: str = "") -> str:
        stored_name = self._new_name(extension)
        target = self.path_for(stored_name)
        fd, tmp = tempfile.mkstemp(dir=self.root, prefix=".upload-", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info("blob saved name=%s bytes=%d", stored_name, len(data))
        return stored_name

    def read(self, stored_name: str) -> bytes:
        try:
            return self.path_for(stored_name).read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise BlobNotFound()

    def delete(self, stored_name: str) -> None:
        try:
            self.path_for(stored_name).unlink(missing_ok=True)
        except BlobNotFound:
            pass
