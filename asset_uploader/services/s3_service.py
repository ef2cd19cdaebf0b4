import mimetypes
import threading
from typing import Optional, Tuple

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from asset_uploader.errors import StorageError
from asset_uploader.schemas.upload import StorageSettings

logger = structlog.get_logger()

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class S3Service:
    def __init__(self):
        self._client = None
        self._client_key: Optional[Tuple[str, str, str]] = None
        self._lock = threading.Lock()

    def client(self, settings: StorageSettings):
        """
        Return an S3 client bound to the region and credentials in ``settings``.

        The client is cached and rebuilt whenever any of them change.
        """
        client_key = (settings.region, settings.access_key_id, settings.secret_access_key)
        with self._lock:
            if self._client is None or self._client_key != client_key:
                self._client = boto3.client(
                    's3',
                    aws_access_key_id=settings.access_key_id or None,
                    aws_secret_access_key=settings.secret_access_key or None,
                    region_name=settings.region or None
                )
                self._client_key = client_key
                logger.info("Created S3 client", region=settings.region)
            return self._client

    def upload(self, settings: StorageSettings, key: str, body: bytes, filename: str) -> None:
        """
        Put ``body`` at ``key`` in the configured bucket.

        Args:
            settings: Active storage settings
            key: Object key
            body: File contents
            filename: Name used to derive the content type

        Raises:
            StorageError: If the object store rejects the upload
        """
        content_type = mimetypes.guess_type(filename)[0] or DEFAULT_CONTENT_TYPE

        try:
            self.client(settings).put_object(
                Bucket=settings.bucket,
                Key=key,
                Body=body,
                ContentLength=len(body),
                ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(e) from e

        logger.info(
            "Uploaded object",
            bucket=settings.bucket,
            s3_key=key,
            content_type=content_type,
            size=len(body)
        )

    @staticmethod
    def public_url(bucket: str, key: str, host: str = "") -> str:
        """
        Build the public URL of an object.

        The bucket name is used as the host by default; a configured host
        override without a scheme is served over plain http.
        """
        authority = f"https://{bucket}"
        if host:
            authority = host if host.startswith("http") else f"http://{host}"
        return f"{authority}/{key}"
