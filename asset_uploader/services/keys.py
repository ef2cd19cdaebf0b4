import posixpath
import uuid
from typing import Any, Callable


def build_key(
    upload_path: str,
    folder: str,
    filename: str,
    token_factory: Callable[[], Any] = uuid.uuid4,
) -> str:
    """
    Build the object key for an upload.

    The key is ``<upload_path>/<folder>/<unique token><extension>`` without a
    leading slash. The extension is taken from ``filename`` as is and may be
    empty.
    """
    prefix = upload_path or "/"
    if not prefix.endswith("/"):
        prefix += "/"

    # Object keys do not start with a slash
    key = prefix[1:] if prefix.startswith("/") else prefix

    if folder:
        key += folder + "/"

    extension = posixpath.splitext(filename or "")[1]
    return f"{key}{token_factory()}{extension}"
