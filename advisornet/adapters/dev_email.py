"""
Dev Email Adapter.

Logs emails instead of sending. Used for local development and tests,
and whenever no email function URL is configured.

Key behaviors:
- Renders connection requests locally and logs them
- Returns SKIPPED status (not SENT)
- Stores emails in memory for test assertions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from advisornet.domain.notifications import render_connection_email
from advisornet.ports.email import ConnectionRequestNotice, EmailResult, EmailStatus

logger = logging.getLogger(__name__)


@dataclass
class SentEmail:
    """Record of a logged email for test assertions."""

    id: str
    recipient: str
    subject: str
    body_html: str
    body_text: str
    logged_at: datetime


@dataclass
class DevEmailAdapter:
    """Email adapter that logs instead of sending. Implements EmailPort."""

    sent_emails: list[SentEmail] = field(default_factory=list)

    log_level: int = logging.INFO
    log_body: bool = True
    body_preview_length: int = 100

    brand_name: str = "Codonyx"
    bio_preview_chars: int = 200

    def send_connection_request(self, notice: ConnectionRequestNotice) -> EmailResult:
        message = render_connection_email(
            recipient_name=notice.recipient_name,
            sender_name=notice.sender_name,
            sender_title=notice.sender_title,
            sender_organisation=notice.sender_organisation,
            sender_bio=notice.sender_bio,
            connection_page_url=notice.connection_page_url,
            brand_name=self.brand_name,
            bio_preview_chars=self.bio_preview_chars,
        )
        return self.send_email(
            notice.recipient_email, message.subject, message.body_html, message.body_text
        )

    def send_email(
        self,
        recipient: str,
        subject: str,
        body_html: str,
        body_text: str | None = None,
    ) -> EmailResult:
        message_id = f"dev-{uuid4().hex[:12]}"

        self.sent_emails.append(
            SentEmail(
                id=message_id,
                recipient=recipient,
                subject=subject,
                body_html=body_html,
                body_text=body_text or "",
                logged_at=datetime.now(UTC),
            )
        )

        parts = [f"EMAIL (dev): To={recipient}", f"Subject={subject}"]
        if self.log_body and body_html:
            preview = body_html[: self.body_preview_length]
            if len(body_html) > self.body_preview_length:
                preview += "..."
            parts.append(f"Body={preview}")
        parts.append(f"MessageID={message_id}")
        logger.log(self.log_level, ", ".join(parts))

        return EmailResult(
            status=EmailStatus.SKIPPED,
            message_id=message_id,
            recipient=recipient,
            error="Dev mode - email logged, not sent",
        )

    # --- Test Helper Methods ---

    def get_last_email(self) -> SentEmail | None:
        return self.sent_emails[-1] if self.sent_emails else None

    def get_emails_to(self, recipient: str) -> list[SentEmail]:
        return [e for e in self.sent_emails if e.recipient == recipient]

    def clear(self) -> None:
        self.sent_emails.clear()

    @property
    def email_count(self) -> int:
        return len(self.sent_emails)
