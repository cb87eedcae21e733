"""HTTP client for the WhatsApp gateway API (basic auth, JSON and multipart)."""

import logging
from typing import Any, Dict, Optional

import httpx

from core.config import WhatsAppConfig


logger = logging.getLogger(__name__)


class WhatsAppAPIError(Exception):
    """Raised when the WhatsApp gateway cannot be reached or rejects a request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


def _form_bool(value: bool) -> str:
    return "true" if value else "false"


class WhatsAppClient:
    """
    Thin wrapper over the gateway's ``/send/message`` and ``/send/file`` endpoints.

    An ``httpx.Client`` can be injected (tests pass one built on
    ``httpx.MockTransport``); otherwise one is created per call.
    """

    def __init__(self, config: WhatsAppConfig, http_client: Optional[httpx.Client] = None):
        self.config = config
        self._http_client = http_client

    def send_message(
        self,
        phone: str,
        message: str,
        reply_message_id: Optional[str] = None,
        is_forwarded: bool = False,
        duration: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Send a text message.

        Args:
            phone: Target number in bare international digits (62...)
            message: Message text
            reply_message_id: Message to reply to (optional)
            is_forwarded: Mark the message as forwarded
            duration: Retention duration in seconds (default from config)

        Returns:
            Parsed JSON response

        Raises:
            WhatsAppAPIError: On network failure, non-2xx status or non-JSON body
        """
        payload: Dict[str, Any] = {
            "phone": phone,
            "message": message,
            "is_forwarded": is_forwarded,
            "duration": duration if duration is not None else self.config.default_duration,
        }
        if reply_message_id:
            payload["reply_message_id"] = reply_message_id

        return self._post("/send/message", json=payload)

    def send_file(
        self,
        phone: str,
        caption: str,
        file_bytes: bytes,
        filename: str,
        is_forwarded: bool = False,
        duration: Optional[int] = None,
        content_type: str = "application/pdf"
    ) -> Dict[str, Any]:
        """
        Send a file attachment as multipart form data.

        Raises:
            WhatsAppAPIError: On network failure, non-2xx status or non-JSON body
        """
        data = {
            "phone": phone,
            "caption": caption,
            "is_forwarded": _form_bool(is_forwarded),
            "duration": str(duration if duration is not None else self.config.default_duration),
        }
        files = {"file": (filename, file_bytes, content_type)}

        return self._post("/send/file", data=data, files=files)

    def _post(self, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.config.base_url}{path}"
        auth = httpx.BasicAuth(self.config.username, self.config.password)

        try:
            if self._http_client is not None:
                response = self._http_client.post(url, auth=auth, **kwargs)
            else:
                with httpx.Client(timeout=self.config.timeout) as client:
                    response = client.post(url, auth=auth, **kwargs)
        except httpx.HTTPError as e:
            raise WhatsAppAPIError(f"WhatsApp API request failed: {e}") from e

        if not response.is_success:
            raise WhatsAppAPIError(
                f"WhatsApp API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise WhatsAppAPIError(
                "WhatsApp API returned a non-JSON response",
                status_code=response.status_code,
                response_body=response.text,
            ) from e
