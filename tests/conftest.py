import io

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock
from PIL import Image
from asset_uploader.main import app
from asset_uploader.dependencies import get_uploader
from asset_uploader.host import HostEnvironment
from asset_uploader.schemas.upload import SettingsUpdate, StorageSettings
from asset_uploader.services.s3_service import S3Service
from asset_uploader.services.settings_store import SettingsStore
from asset_uploader.services.uploader import Uploader


class FakeHost(HostEnvironment):
    def __init__(self, max_kb=1024, allowed=None, persisted=None):
        self.max_kb = max_kb
        self.allowed = allowed if allowed is not None else [".png", ".jpg"]
        self.persisted = persisted or SettingsUpdate()
        self.errors = []

    def get_settings(self, plugin_key):
        return self.persisted.model_copy(update={"plugin": plugin_key})

    def maximum_file_size(self):
        return self.max_kb

    def allowed_extensions(self):
        return list(self.allowed)

    def log_error(self, message):
        self.errors.append(message)


def encode_image(size=(64, 32), color=(200, 30, 30), image_format="PNG"):
    output = io.BytesIO()
    Image.new("RGB", size, color).save(output, format=image_format)
    return output.getvalue()


@pytest.fixture
def make_image():
    return encode_image


@pytest.fixture
def storage_settings():
    return StorageSettings(
        access_key_id="AKIATEST",
        secret_access_key="secret",
        region="us-east-1",
        bucket="test-bucket",
        upload_path="/uploads",
        host=""
    )


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def mock_s3_client():
    return MagicMock()


@pytest.fixture
def storage(mock_s3_client):
    service = S3Service()
    service.client = MagicMock(return_value=mock_s3_client)
    return service


@pytest.fixture
def fetcher():
    return MagicMock()


@pytest.fixture
def uploader(storage_settings, host, storage, fetcher):
    return Uploader(
        settings_store=SettingsStore(storage_settings),
        host=host,
        storage=storage,
        fetcher=fetcher,
        default_dimension=16
    )


@pytest.fixture
def client(uploader):
    app.dependency_overrides[get_uploader] = lambda: uploader
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 492)
    return path
