"""
Email port.

Protocol-based interface for transactional email. The only
transactional email today is the connection-request notification.

Implementations:
1. DevEmailAdapter: logs emails (dev/test)
2. FunctionEmailAdapter: POSTs the display fields to an HTTP email function
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol


class EmailStatus(Enum):
    """Email send result status."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"  # Dev adapter or disabled


@dataclass
class EmailResult:
    """Result of an email send attempt."""

    status: EmailStatus
    message_id: str | None = None
    error: str | None = None
    sent_at: datetime | None = None
    recipient: str = ""

    @property
    def ok(self) -> bool:
        return self.status != EmailStatus.FAILED

    @classmethod
    def success(cls, recipient: str, message_id: str | None = None) -> EmailResult:
        return cls(
            status=EmailStatus.SENT,
            message_id=message_id,
            recipient=recipient,
            sent_at=datetime.now(UTC),
        )

    @classmethod
    def skipped(cls, recipient: str, reason: str = "Dev mode") -> EmailResult:
        return cls(status=EmailStatus.SKIPPED, recipient=recipient, error=reason)

    @classmethod
    def failed(cls, recipient: str, error: str) -> EmailResult:
        return cls(status=EmailStatus.FAILED, recipient=recipient, error=error)


@dataclass(frozen=True)
class ConnectionRequestNotice:
    """Display fields for the 'wants to connect' notification."""

    recipient_email: str
    recipient_name: str | None
    sender_name: str | None
    sender_title: str | None
    sender_organisation: str | None
    sender_bio: str | None
    connection_page_url: str


class EmailPort(Protocol):
    def send_connection_request(self, notice: ConnectionRequestNotice) -> EmailResult:
        """
        Notify a member that someone wants to connect.

        Must not raise; delivery problems come back as a FAILED result.
        """
        ...
