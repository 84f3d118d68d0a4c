"""Tests for downloading documents."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from travel_ocr.exceptions import DocumentFetchError
from travel_ocr.storage.fetcher import DocumentFetcher


class TestDocumentFetcher:
    """Tests for DocumentFetcher.fetch."""

    def setup_method(self) -> None:
        self.session = MagicMock()
        self.fetcher = DocumentFetcher(timeout=10, session=self.session)

    def test_http_download(self) -> None:
        self.session.get.return_value = MagicMock(ok=True, content=b"bytes")

        assert self.fetcher.fetch("https://bucket.example.com/doc.jpg?sig=abc") == b"bytes"
        self.session.get.assert_called_once_with(
            "https://bucket.example.com/doc.jpg?sig=abc", timeout=10
        )

    def test_http_error_status(self) -> None:
        self.session.get.return_value = MagicMock(ok=False, status_code=403, reason="Forbidden")

        with pytest.raises(DocumentFetchError) as exc_info:
            self.fetcher.fetch("https://bucket.example.com/doc.jpg?sig=secret")

        assert "403" in str(exc_info.value)
        assert "secret" not in str(exc_info.value)

    def test_transport_error(self) -> None:
        self.session.get.side_effect = requests.exceptions.Timeout("timed out")

        with pytest.raises(DocumentFetchError):
            self.fetcher.fetch("https://bucket.example.com/doc.jpg")

    def test_file_url(self, tmp_path: Path) -> None:
        path = tmp_path / "ticket.pdf"
        path.write_bytes(b"%PDF-1.4")

        assert self.fetcher.fetch(path.as_uri()) == b"%PDF-1.4"
        self.session.get.assert_not_called()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DocumentFetchError):
            self.fetcher.fetch((tmp_path / "missing.jpg").as_uri())

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(DocumentFetchError, match="Unsupported URL scheme"):
            self.fetcher.fetch("ftp://host/doc.jpg")
