from functools import lru_cache

from asset_uploader.config import settings
from asset_uploader.host import EnvironmentHost, storage_settings_from
from asset_uploader.services.fetcher import RemoteFetcher
from asset_uploader.services.s3_service import S3Service
from asset_uploader.services.settings_store import SettingsStore
from asset_uploader.services.uploader import Uploader


@lru_cache
def get_uploader() -> Uploader:
    """Process-wide uploader; its settings store is shared by all requests."""
    return Uploader(
        settings_store=SettingsStore(storage_settings_from(settings)),
        host=EnvironmentHost(),
        storage=S3Service(),
        fetcher=RemoteFetcher(timeout=settings.fetch_timeout),
        default_dimension=settings.profile_image_dimension
    )
