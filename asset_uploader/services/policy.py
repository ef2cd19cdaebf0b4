import posixpath
from typing import List
from urllib.parse import urlparse

import structlog

from asset_uploader.errors import DisallowedExtension, FileTooLarge

logger = structlog.get_logger()


def file_extension(path: str) -> str:
    """
    Return the lower-cased extension of a path or URL, including the dot.

    Follows the usual extname rules: ``".bashrc"`` has no extension, while
    ``"photo."`` has the bare extension ``"."``. For http(s) URLs only the
    URL path is considered.
    """
    if not path:
        return ""
    parsed = urlparse(path)
    if parsed.scheme in ("http", "https"):
        path = parsed.path
    return posixpath.splitext(path.replace("\\", "/"))[1].lower()


def check_size(byte_length: int, max_kb: int) -> None:
    """Fail when the byte length exceeds ``max_kb`` kilobytes."""
    if byte_length > max_kb * 1024:
        logger.warning(
            "Rejected upload over size limit",
            size=byte_length,
            limit_kb=max_kb
        )
        raise FileTooLarge(size=byte_length, limit_kb=max_kb)


def is_extension_allowed(path: str, allowed: List[str]) -> bool:
    if not allowed:
        return True
    extension = file_extension(path)
    return bool(extension) and extension != "." and extension in allowed


def check_extension(path: str, allowed: List[str]) -> None:
    """Fail unless the allow-list is empty or contains the path's extension."""
    if not is_extension_allowed(path, allowed):
        extension = file_extension(path)
        logger.warning(
            "Rejected upload with disallowed extension",
            extension=extension,
            allowed=allowed
        )
        raise DisallowedExtension(extension=extension, allowed=allowed)
