"""Download document bytes from their source URLs.

Pre-signed ``http(s)`` URLs are fetched with requests; ``file://`` URLs
(used by locally loaded archives) are read from disk.
"""

from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

from travel_ocr.exceptions import DocumentFetchError
from travel_ocr.utils.logger import get_logger

logger = get_logger(__name__)


def _display(url: str) -> str:
    # Pre-signed URLs carry credentials in the query string.
    return url.split("?", 1)[0][:80]


class DocumentFetcher:
    """Fetches raw document bytes.

    Args:
        timeout: Request timeout in seconds.
        session: Optional requests session to reuse connections.
    """

    def __init__(self, timeout: float = 30.0, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str) -> bytes:
        """Download a document.

        Args:
            url: Source URL of the document.

        Returns:
            The document bytes.

        Raises:
            DocumentFetchError: If the document cannot be retrieved.
        """
        parsed = urlparse(url)

        if parsed.scheme == "file":
            path = Path(unquote(parsed.path))
            try:
                return path.read_bytes()
            except OSError as exc:
                raise DocumentFetchError(f"Cannot read {path}: {exc}") from exc

        if parsed.scheme not in ("http", "https"):
            raise DocumentFetchError(f"Unsupported URL scheme: {parsed.scheme or 'none'}")

        logger.info("Downloading %s", _display(url))
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise DocumentFetchError(f"Download failed: {exc}", url=_display(url)) from exc

        if not response.ok:
            raise DocumentFetchError(
                f"Failed to download document: {response.status_code} {response.reason}",
                url=_display(url),
            )

        logger.debug("Downloaded %d bytes from %s", len(response.content), _display(url))
        return response.content
