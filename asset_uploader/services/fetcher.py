import requests
import structlog

from asset_uploader.errors import FetchFailed

logger = structlog.get_logger()


class RemoteFetcher:
    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def fetch(self, url: str) -> bytes:
        """
        Download a remote file into memory.

        Args:
            url: Absolute http(s) URL

        Returns:
            The full response body

        Raises:
            FetchFailed: On a non-2xx status or a transport error
        """
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Failed to fetch remote file", url=url, error=str(e))
            raise FetchFailed(url, reason=str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.error(
                "Remote file request was not successful",
                url=url,
                status_code=response.status_code
            )
            raise FetchFailed(url, status_code=response.status_code)

        body = response.content
        logger.info("Fetched remote file", url=url, size=len(body))
        return body
