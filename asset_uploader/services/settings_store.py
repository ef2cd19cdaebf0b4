import threading
from typing import Optional

import structlog

from asset_uploader.config import PLUGIN_KEY
from asset_uploader.schemas.upload import SettingsUpdate, StorageSettings

logger = structlog.get_logger()

FIELDS = ("access_key_id", "secret_access_key", "region", "bucket", "upload_path", "host")


class SettingsStore:
    """
    Holds the active storage settings.

    Readers get an immutable snapshot; reloads build a new snapshot and swap
    it in under a lock, so a reader never sees a half-applied update.
    """

    def __init__(self, initial: Optional[StorageSettings] = None):
        self._settings = initial or StorageSettings()
        self._lock = threading.Lock()

    def current(self) -> StorageSettings:
        return self._settings

    def reload(self, update: Optional[SettingsUpdate]) -> None:
        """
        Apply a partial update.

        Updates tagged for another plugin are ignored. Only fields carrying a
        non-empty value replace the stored one.
        """
        if update is None:
            return
        if update.plugin and update.plugin != PLUGIN_KEY:
            return

        with self._lock:
            current = self._settings
            changes = {}
            for field in FIELDS:
                value = getattr(update, field)
                if value and value != getattr(current, field):
                    changes[field] = value

            if not changes:
                return

            self._settings = current.model_copy(update=changes)

        logger.info(
            "Reloaded storage settings",
            fields=sorted(changes)
        )
