"""Error taxonomy for the upload pipeline."""

from typing import List, Optional

from fastapi import HTTPException

from asset_uploader.config import PLUGIN_ID


class UploadError(Exception):
    """Base exception for upload errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInput(UploadError):
    """Raised when the file, its path or the image url is missing."""

    pass


class FileTooLarge(UploadError):
    """Raised when a file exceeds the configured size limit."""

    def __init__(self, size: int, limit_kb: int) -> None:
        self.size = size
        self.limit_kb = limit_kb
        super().__init__(f"[[error:file-too-big, {limit_kb}]]")


class DisallowedExtension(UploadError):
    """Raised when a file extension is not in the allow-list."""

    def __init__(self, extension: str, allowed: List[str]) -> None:
        self.extension = extension
        self.allowed = list(allowed)
        super().__init__(f"[[error:invalid-file-type, {'&#44; '.join(self.allowed)}]]")


class FetchFailed(UploadError):
    """Raised when a remote image could not be downloaded."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"Failed to fetch image. Status: {status_code}"
        else:
            message = f"Failed to fetch image. {reason}".rstrip()
        super().__init__(message)


class TransformFailed(UploadError):
    """Raised when an image cannot be decoded, resized or re-encoded."""

    pass


class StorageError(UploadError):
    """Raised when the object store rejects an upload.

    The message is prefixed with the plugin identifier so failures can be
    attributed in shared logs.
    """

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"{PLUGIN_ID} :: {cause}")


_STATUS_CODES = {
    InvalidInput: 400,
    DisallowedExtension: 400,
    FileTooLarge: 413,
    TransformFailed: 422,
    FetchFailed: 502,
    StorageError: 502,
}


def map_exception_to_http(exception: Exception) -> HTTPException:
    """Map upload errors to HTTP exceptions carrying their user-facing message."""
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(exception, error_type):
            return HTTPException(status_code=status_code, detail=exception.message)

    return HTTPException(
        status_code=500,
        detail="Internal server error",
    )
