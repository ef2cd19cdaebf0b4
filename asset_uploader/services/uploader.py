import posixpath
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse

import structlog
from pydantic import ValidationError

from asset_uploader.config import PLUGIN_KEY
from asset_uploader.errors import InvalidInput, StorageError
from asset_uploader.host import HostEnvironment
from asset_uploader.schemas.upload import (
    FileUploadPayload,
    ImageUploadPayload,
    ImageSource,
    LocalFile,
    RemoteURL,
    SettingsUpdate,
    UploadResult,
    parse_image_source,
)
from asset_uploader.services.fetcher import RemoteFetcher
from asset_uploader.services.image_transformer import ImageFormat, TransformedImage, resize_square
from asset_uploader.services.keys import build_key
from asset_uploader.services.policy import check_extension, check_size, file_extension
from asset_uploader.services.s3_service import S3Service
from asset_uploader.services.settings_store import SettingsStore

logger = structlog.get_logger()


class Uploader:
    """
    Validates uploads and stores them in the configured bucket.

    Local files are size- and extension-checked, read and stored as is.
    Remote images are checked against any declared size and the extension
    list, downloaded, resized to a square and stored in their detected format.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        host: HostEnvironment,
        storage: Optional[S3Service] = None,
        fetcher: Optional[RemoteFetcher] = None,
        transformer: Callable[[bytes, int], TransformedImage] = resize_square,
        default_dimension: int = 200,
    ):
        self.settings_store = settings_store
        self.host = host
        self.storage = storage or S3Service()
        self.fetcher = fetcher or RemoteFetcher()
        self.transformer = transformer
        self.default_dimension = default_dimension

    def upload_file(self, file: Optional[LocalFile], folder: str = "") -> UploadResult:
        if file is None:
            raise InvalidInput("invalid file")
        if not file.path:
            raise InvalidInput("invalid file path")
        return self._upload_local(file, folder)

    def upload_image(
        self,
        image: Optional[ImageSource],
        folder: str = "",
        dimension: Optional[int] = None
    ) -> UploadResult:
        if image is None:
            raise InvalidInput("invalid image")
        if isinstance(image, RemoteURL):
            return self._upload_remote(image, folder, dimension)
        if not image.path:
            raise InvalidInput("invalid image path")
        return self._upload_local(image, folder)

    def upload_file_payload(self, data: Dict[str, Any]) -> UploadResult:
        """Entry point for loosely typed ``{"file": {...}, "folder": ...}`` payloads."""
        try:
            payload = FileUploadPayload.model_validate(data)
        except ValidationError as e:
            raise InvalidInput("invalid file") from e
        return self.upload_file(payload.file, payload.folder or "")

    def upload_image_payload(self, data: Dict[str, Any]) -> UploadResult:
        """Entry point for ``{"image": {...}, "folder": ..., "dimension": ...}`` payloads."""
        try:
            payload = ImageUploadPayload.model_validate(data)
            image = parse_image_source(payload.image) if payload.image else None
        except ValidationError as e:
            raise InvalidInput("invalid image") from e
        return self.upload_image(image, payload.folder or "", payload.dimension)

    def reload_settings(self, update: Optional[SettingsUpdate] = None) -> None:
        """Re-read the persisted settings unless the update targets another plugin."""
        if update is not None and update.plugin and update.plugin != PLUGIN_KEY:
            return
        self.settings_store.reload(self.host.get_settings(PLUGIN_KEY))

    def _upload_local(self, file: LocalFile, folder: str) -> UploadResult:
        # Policy is read on every call so host changes apply immediately
        check_size(file.size, self.host.maximum_file_size())

        name_to_check = file.original_name or file.path
        check_extension(name_to_check, self.host.allowed_extensions())

        try:
            with open(file.path, "rb") as f:
                body = f.read()
        except OSError as e:
            logger.warning("Failed to read upload", path=file.path, error=str(e))
            raise InvalidInput("invalid file path") from e

        name = file.name or posixpath.basename(name_to_check)
        key_name = name if file_extension(name) else name_to_check
        return self._store(name, key_name, folder, body)

    def _upload_remote(self, image: RemoteURL, folder: str, dimension: Optional[int]) -> UploadResult:
        if not image.url:
            raise InvalidInput("invalid image url")

        if image.size is not None:
            check_size(image.size, self.host.maximum_file_size())
        check_extension(image.url, self.host.allowed_extensions())

        body = self.fetcher.fetch(image.url)
        transformed = self.transformer(body, dimension or image.dimension or self.default_dimension)

        filename = target_filename(image, transformed.format)
        return self._store(filename, filename, folder, transformed.data)

    def _store(self, name: str, key_name: str, folder: str, body: bytes) -> UploadResult:
        settings = self.settings_store.current()
        key = build_key(settings.upload_path, folder, key_name)

        try:
            self.storage.upload(settings, key, body, key_name)
        except StorageError as e:
            self.host.log_error(e.message)
            raise

        return UploadResult(
            name=name,
            url=self.storage.public_url(settings.bucket, key, settings.host)
        )


def target_filename(image: RemoteURL, image_format: ImageFormat) -> str:
    """Name a resized image after its source, with the output format's extension."""
    source = image.name or posixpath.basename(urlparse(image.url).path)
    stem = posixpath.splitext(source)[0] or "image"
    return stem + image_format.extension
