"""
HTTP email function adapter.

Hands connection-request notifications to a hosted email function. The
function owns the template and the provider; this adapter only POSTs the
display fields it renders from. Never raises: transport errors and non-2xx
responses come back as FAILED results and are logged.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from advisornet.ports.email import ConnectionRequestNotice, EmailResult

logger = logging.getLogger(__name__)


class FunctionEmailAdapter:
    def __init__(
        self,
        function_url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.function_url = function_url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def build_payload(notice: ConnectionRequestNotice) -> dict[str, Any]:
        # Key names are the function's request contract
        return {
            "recipientEmail": notice.recipient_email,
            "recipientName": notice.recipient_name or "",
            "senderName": notice.sender_name or "",
            "senderTitle": notice.sender_title or "",
            "senderOrganization": notice.sender_organisation or "",
            "senderBio": notice.sender_bio or "",
            "connectionPageUrl": notice.connection_page_url,
        }

    def send_connection_request(self, notice: ConnectionRequestNotice) -> EmailResult:
        recipient = notice.recipient_email
        payload = self.build_payload(notice)
        client = self._client or httpx.Client(timeout=self.timeout)
        try:
            response = client.post(self.function_url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning("Email function request failed for %s: %s", recipient, e)
            return EmailResult.failed(recipient, str(e))
        finally:
            if self._client is None:
                client.close()

        if response.is_success:
            message_id = None
            try:
                body = response.json()
                if isinstance(body, dict):
                    message_id = body.get("id")
            except ValueError:
                pass
            logger.info("Email sent to %s (id=%s)", recipient, message_id)
            return EmailResult.success(recipient, message_id)

        logger.warning(
            "Email function returned %s for %s: %s",
            response.status_code,
            recipient,
            response.text[:200],
        )
        return EmailResult.failed(recipient, f"HTTP {response.status_code}")
