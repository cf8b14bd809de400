# /app/services/storage_service.py

"""
Object storage for uploaded files.

Objects live under `<STORAGE_ROOT>/<bucket>/<path>` on local disk and are
served read-only by the API under `/files/<bucket>/<path>`, so every stored
object has a stable public URL. Uploads never overwrite an existing object.
"""

import os
import time
import uuid
from typing import Optional
from urllib.parse import unquote, urlparse

from app.core import config
from app.core.exceptions import FetchError, GradingValidationError, UpstreamError

SUBMISSIONS_BUCKET = "assignment-files"
SUBMISSIONS_PREFIX = "assignments"
SIGNATURES_BUCKET = "signatures"
SIGNATURES_PREFIX = "signatures"


def _resolve_object_path(bucket: str, path: str) -> str:
    """Maps a bucket/path pair to a file inside the storage root, rejecting traversal."""
    root = os.path.abspath(config.get_storage_root())
    bucket_dir = os.path.abspath(os.path.join(root, bucket))
    full_path = os.path.abspath(os.path.join(bucket_dir, path))
    if not bucket or os.path.dirname(bucket_dir) != root:
        raise GradingValidationError(f"Invalid storage bucket: {bucket!r}")
    if not path or not full_path.startswith(bucket_dir + os.sep):
        raise GradingValidationError(f"Invalid storage path: {path!r}")
    return full_path


def build_object_name(prefix: str, original_filename: Optional[str], name_hint: str = "") -> str:
    """
    Builds a collision-resistant object path: a millisecond timestamp plus a
    short random suffix, keeping the original file extension.
    e.g. `assignments/1718000000000-a1b2c3.pdf`
    """
    _, ext = os.path.splitext(os.path.basename(original_filename or ""))
    stem = f"{name_hint}{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"
    return f"{prefix}/{stem}{ext.lower()}"


def get_public_url(bucket: str, path: str) -> str:
    return f"{config.get_public_files_base_url()}/{bucket}/{path}"


def upload(bucket: str, path: str, data: bytes) -> str:
    """
    Stores `data` at bucket/path and returns its public URL.

    Raises:
        UpstreamError: if the object already exists or cannot be written.
    """
    full_path = _resolve_object_path(bucket, path)
    try:
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        # 'xb' refuses to overwrite an existing object.
        with open(full_path, "xb") as buffer:
            buffer.write(data)
    except FileExistsError:
        raise UpstreamError(f"Upload failed: object {bucket}/{path} already exists.")
    except OSError as e:
        print(f"ERROR uploading {bucket}/{path}: {e}")
        raise UpstreamError(f"Upload failed: {e}")
    return get_public_url(bucket, path)


def delete(bucket: str, path: str) -> bool:
    """Removes an object. Returns False if there was nothing to remove."""
    full_path = _resolve_object_path(bucket, path)
    if not os.path.isfile(full_path):
        return False
    try:
        os.remove(full_path)
    except OSError as e:
        print(f"ERROR deleting {bucket}/{path}: {e}")
        raise UpstreamError(f"Delete failed: {e}")
    return True


def locate_public_url(url: str) -> Optional[tuple]:
    """
    Returns the (bucket, path) pair behind a public URL issued by this store,
    or None if the URL points somewhere else.
    """
    base_url = config.get_public_files_base_url()
    if not url.startswith(base_url + "/"):
        return None
    try:
        relative = unquote(urlparse(url[len(base_url) + 1:]).path)
    except ValueError as e:
        raise FetchError(f"Invalid file URL {url!r}: {e}")
    bucket, _, path = relative.partition("/")
    if not bucket or not path:
        return None
    return bucket, path


def read_public_url(url: str) -> Optional[bytes]:
    """
    Reads an object back through its public URL without an HTTP round-trip.
    Returns None when the URL is not served by this store.
    """
    location = locate_public_url(url)
    if location is None:
        return None
    full_path = _resolve_object_path(*location)
    try:
        with open(full_path, "rb") as f:
            return f.read()
    except OSError as e:
        print(f"ERROR reading stored object {url}: {e}")
        raise FetchError(f"Stored file could not be read: {e}")
