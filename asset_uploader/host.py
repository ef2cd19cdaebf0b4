"""
Interfaces consumed from the host application.

The host owns settings persistence, the global upload policy and the shared
error log. ``EnvironmentHost`` backs them with the process configuration.
"""

from abc import ABC, abstractmethod
from typing import Callable, List

import structlog

from asset_uploader.config import Settings
from asset_uploader.schemas.upload import SettingsUpdate, StorageSettings

logger = structlog.get_logger()


class HostEnvironment(ABC):
    @abstractmethod
    def get_settings(self, plugin_key: str) -> SettingsUpdate:
        """Return the persisted settings for ``plugin_key``."""

    @abstractmethod
    def maximum_file_size(self) -> int:
        """Return the upload size limit in KB."""

    @abstractmethod
    def allowed_extensions(self) -> List[str]:
        """Return lower-cased, dot-prefixed extensions; empty means any."""

    @abstractmethod
    def log_error(self, message: str) -> None:
        pass


def parse_extensions(value: str) -> List[str]:
    """Turn ``"png, JPG,.gif"`` into ``[".png", ".jpg", ".gif"]``."""
    extensions = []
    for item in value.split(","):
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith("."):
            item = "." + item
        extensions.append(item)
    return extensions


def storage_settings_from(config: Settings) -> StorageSettings:
    return StorageSettings(
        access_key_id=config.aws_access_key_id,
        secret_access_key=config.aws_secret_access_key,
        region=config.aws_region,
        bucket=config.s3_bucket_name,
        upload_path=config.s3_upload_path,
        host=config.s3_host
    )


class EnvironmentHost(HostEnvironment):
    """Host backed by environment variables and the ``.env`` file.

    Configuration is read again on every call so policy changes apply
    without a restart.
    """

    def __init__(self, settings_factory: Callable[[], Settings] = Settings):
        self._settings_factory = settings_factory

    def get_settings(self, plugin_key: str) -> SettingsUpdate:
        snapshot = storage_settings_from(self._settings_factory())
        return SettingsUpdate(plugin=plugin_key, **snapshot.model_dump())

    def maximum_file_size(self) -> int:
        return self._settings_factory().maximum_file_size

    def allowed_extensions(self) -> List[str]:
        return parse_extensions(self._settings_factory().allowed_file_extensions)

    def log_error(self, message: str) -> None:
        logger.error(message)
