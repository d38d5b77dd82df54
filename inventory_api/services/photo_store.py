"""
Inventory API — Photo Store
=============================

What:  Saves uploaded photos into the cache directory and finds them again.
Why:   Centralizes all file system access for photos, including the checks that
       keep client-supplied filenames from choosing where bytes land on disk.
How:   Uploads are streamed to disk in chunks with aiofiles under a generated
       <uuid4 hex><ext> name. Only a sanitized extension survives from the
       client's filename.
Who:   Created once per application by create_app(); used by the route handlers.

Layout:
    cache/
    ├── 3f2c9a0d41f84f1c9c0e9f1b6a0d2e11.jpg
    └── 8b1e5cbb7f6a4c6f8d0a4e7e2b9c5d10.png

    Flat on purpose: the directory is mounted as-is for static serving under
    its own name, so /<cache>/<stored name> must map 1:1 to a file.

Security:
    - Path traversal: stored names are generated, and path_for() refuses any
      name that is not a bare file name inside the cache directory
    - Filename collisions: uuid4 names, no timestamp races between uploads
"""

import logging
import os
import re
import uuid
from pathlib import Path, PurePosixPath
from typing import Optional

import aiofiles
from starlette.datastructures import UploadFile

from inventory_api.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

# Extensions longer than this, or with anything but [a-z0-9], are dropped
_SAFE_EXTENSION = re.compile(r"^\.[a-z0-9]{1,10}$")

DEFAULT_CHUNK_SIZE = 1024 * 1024


def sanitize_extension(original_filename: Optional[str]) -> str:
    """
    Keep only a safe, lower-cased extension from a client filename.

    Both separators are treated as path separators so a Windows-style
    "C:\\photos\\drill.JPG" and "../../etc/x.jpg" reduce to ".jpg".
    Returns "" when nothing safe is left.
    """
    if not original_filename:
        return ""
    basename = PurePosixPath(original_filename.replace("\\", "/")).name
    ext = PurePosixPath(basename).suffix.lower()
    if not _SAFE_EXTENSION.match(ext):
        return ""
    return ext


def url_prefix_for(cache_dir: str) -> str:
    """
    URL path the cache directory is reachable under.

    The directory name as configured, in POSIX form, without "." / ".."
    segments: "cache" and "./cache" → "/cache", "data/photos" → "/data/photos".
    """
    parts = [
        part
        for part in PurePosixPath(cache_dir.replace("\\", "/")).parts
        if part not in ("/", ".", "..")
    ]
    if not parts:
        parts = [Path(cache_dir).resolve().name or "cache"]
    return "/" + "/".join(parts)


class PhotoStore:
    """
    Owns the mapping from generated stored names to bytes on disk.

    Lifecycle of an uploaded photo:
        1. Handler passes the UploadFile → PhotoStore.save()
        2. Stored name generated from uuid4 + sanitized extension
        3. Upload streamed to <cache>/<stored name> chunk by chunk
        4. Stored name returned (the item keeps it as photo_ref)
        5. On write failure: the partial file is removed, StorageError raised
    """

    def __init__(self, cache_dir: str, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Args:
            cache_dir:  Directory for photo files, created if absent.
            chunk_size: Bytes per read while streaming an upload.
        """
        self.cache_name = cache_dir
        self.root = Path(cache_dir).resolve()
        self.chunk_size = chunk_size
        self.url_prefix = url_prefix_for(cache_dir)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                message="Photo cache directory could not be created",
                context={"path": str(self.root), "os_error": str(e)},
            )
        logger.info("PhotoStore initialized with root=%s url_prefix=%s", self.root, self.url_prefix)

    def generate_name(self, original_filename: Optional[str]) -> str:
        return f"{uuid.uuid4().hex}{sanitize_extension(original_filename)}"

    async def save(self, upload: UploadFile, original_filename: Optional[str] = None) -> str:
        """
        Stream an uploaded file into the cache directory.

        Args:
            upload:            The multipart file part (read asynchronously).
            original_filename: Client filename; only its extension is used.
                               Defaults to upload.filename.

        Returns:
            The stored name to keep as the item's photo_ref.

        Raises:
            StorageError if the file cannot be written.
        """
        if original_filename is None:
            original_filename = upload.filename
        stored_name = self.generate_name(original_filename)
        destination = self.root / stored_name
        written = 0

        try:
            async with aiofiles.open(destination, "wb") as f:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    await f.write(chunk)
                    written += len(chunk)
        except OSError as e:
            logger.error("Failed to store photo at %s: %s", destination, str(e))
            await self.cleanup(stored_name)
            raise StorageError(
                message="Failed to save uploaded photo. Please try again.",
                context={"path": str(destination), "os_error": str(e)},
            )

        logger.info("Photo stored: %s (%d bytes)", stored_name, written)
        return stored_name

    def path_for(self, stored_name: str) -> Path:
        """
        Absolute path of a stored photo.

        Raises NotFoundError for anything that is not a bare file name, so a
        tampered photo_ref can never point outside the cache directory.
        """
        if not stored_name or stored_name in (".", "..") or Path(stored_name).name != stored_name:
            raise NotFoundError(resource="Photo", resource_id=stored_name)
        return self.root / stored_name

    def exists(self, stored_name: str) -> bool:
        try:
            return self.path_for(stored_name).is_file()
        except NotFoundError:
            return False

    def open_for_read(self, stored_name: str) -> Path:
        """
        Locate a stored photo for streaming back to the client.

        Returns the path (FileResponse streams it); raises NotFoundError when
        the file is no longer on disk. This is the only place photo existence
        is checked.
        """
        path = self.path_for(stored_name)
        if not path.is_file():
            logger.warning("Photo referenced but missing on disk: %s", stored_name)
            raise NotFoundError(resource="Photo", resource_id=stored_name)
        return path

    def public_path(self, stored_name: Optional[str]) -> Optional[str]:
        """URL path clients use to fetch a photo, or None when there is none."""
        if not stored_name:
            return None
        return f"{self.url_prefix}/{stored_name}"

    async def cleanup(self, stored_name: str) -> None:
        """
        Remove a stored file if it exists.

        Used after a failed write. Failing to delete is logged and not raised:
        the original error is the one the client needs to see.
        """
        try:
            path = self.path_for(stored_name)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up photo: %s", stored_name)
        except (OSError, NotFoundError) as e:
            logger.warning("Failed to clean up photo %s: %s", stored_name, str(e))
