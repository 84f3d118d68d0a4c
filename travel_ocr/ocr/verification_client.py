"""Client for the third-party identity-document verification API."""

import time
from typing import Any

import requests

from travel_ocr.exceptions import VerificationError
from travel_ocr.utils.config import VerificationConfig
from travel_ocr.utils.logger import get_logger

logger = get_logger(__name__)


class IdentityVerificationClient:
    """Sends passport images to the verification API for recognition.

    Args:
        config: API endpoint, credentials and timeout.
        session: Optional requests session to reuse connections.
    """

    def __init__(
        self,
        config: VerificationConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config or VerificationConfig()
        self.session = session or requests.Session()

    def verify_passport(self, front: bytes, back: bytes) -> dict[str, Any]:
        """Submit both passport sides and return the structured response.

        Args:
            front: Image bytes of the passport front.
            back: Image bytes of the passport back.

        Returns:
            The JSON object returned by the API.

        Raises:
            VerificationError: On transport failure, non-2xx status, or a
                body that is not a JSON object.
        """
        files = {
            "file_front": ("passport_front.jpg", front, "image/jpeg"),
            "file_back": ("passport_back.jpg", back, "image/jpeg"),
        }
        headers = {
            "X-API-Key": self.config.api_key,
            "X-Auth-Type": self.config.auth_type,
            "X-Reference-ID": f"passport_{int(time.time() * 1000)}",
        }

        try:
            response = self.session.post(
                self.config.api_url,
                files=files,
                data={"consent": self.config.consent},
                headers=headers,
                timeout=self.config.timeout_s,
            )
        except requests.exceptions.RequestException as exc:
            raise VerificationError(f"Verification API unreachable: {exc}") from exc

        if not response.ok:
            raise VerificationError(
                f"Verification API error: {response.status_code} - {response.text[:200]}"
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise VerificationError("Verification API returned invalid JSON") from exc

        if not isinstance(result, dict):
            raise VerificationError(
                f"Verification API returned {type(result).__name__}, expected object"
            )

        logger.info("Verification API returned %d fields", len(result))
        return result
