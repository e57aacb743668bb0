"""
Blueprint image loading and data URL conversion
"""

import base64
import binascii
import os
import re

from utils.debug_logger import debug_logger


SUPPORTED_IMAGE_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.bmp': 'image/bmp',
}

MAX_IMAGE_BYTES = 10 * 1024 * 1024
# Larger blueprints are left out of saved projects; the selections still save
MAX_EXPORT_DATA_URL_CHARS = 2_500_000

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


class BlueprintImageError(Exception):
    """Raised for unsupported, oversized or unreadable blueprint images"""


def image_file_filter():
    """File dialog filter string for the supported types"""
    patterns = " ".join(f"*{ext}" for ext in SUPPORTED_IMAGE_TYPES)
    return f"Images ({patterns})"


def mime_type_for(path):
    ext = os.path.splitext(str(path))[1].lower()
    mime = SUPPORTED_IMAGE_TYPES.get(ext)
    if mime is None:
        raise BlueprintImageError(
            f"Unsupported image type '{ext or os.path.basename(str(path))}'. "
            "Use PNG, JPEG, GIF, WebP or BMP."
        )
    return mime


def to_data_url(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def load_image_file(path) -> str:
    """Read an image from disk and return it as a data URL"""
    mime = mime_type_for(path)
    try:
        size = os.path.getsize(path)
    except OSError as e:
        raise BlueprintImageError(f"Could not open {path}: {e}")
    if size > MAX_IMAGE_BYTES:
        raise BlueprintImageError(
            f"Image is {size / (1024 * 1024):.1f} MB; the limit is {MAX_IMAGE_BYTES // (1024 * 1024)} MB."
        )
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise BlueprintImageError(f"Could not read {path}: {e}")
    debug_logger.info("Blueprint", f"Loaded {os.path.basename(str(path))}", {'bytes': len(data), 'mime': mime})
    return to_data_url(data, mime)


def decode_data_url(data_url: str):
    """Split a data URL into (mime, bytes)"""
    if not isinstance(data_url, str):
        raise BlueprintImageError("Blueprint data is not an image data URL")
    match = _DATA_URL.match(data_url)
    if not match:
        raise BlueprintImageError("Blueprint data is not an image data URL")
    mime = match.group('mime').lower()
    if mime not in SUPPORTED_IMAGE_TYPES.values():
        raise BlueprintImageError(f"Unsupported image type '{mime}'")
    try:
        data = base64.b64decode(match.group('payload'), validate=True)
    except (binascii.Error, ValueError) as e:
        raise BlueprintImageError(f"Blueprint data is corrupt: {e}")
    return mime, data


def blueprint_for_export(data_url):
    """Blueprint value for a project file, plus a warning when it had to be dropped"""
    if not data_url:
        return None, None
    if len(data_url) > MAX_EXPORT_DATA_URL_CHARS:
        debug_logger.warning("Blueprint", "Image too large to save with the project",
                             {'chars': len(data_url)})
        return None, ("The blueprint image is too large to save with the project. "
                      "Your selections were saved; reload the image when you open it.")
    return data_url, None
