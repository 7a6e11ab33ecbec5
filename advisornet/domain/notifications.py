"""Transactional email content."""

from dataclasses import dataclass
from html import escape

DEFAULT_RECIPIENT_NAME = "User"
DEFAULT_SENDER_NAME = "A Codonyx user"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    body_html: str
    body_text: str


def truncate_bio(bio: str, limit: int = 200) -> str:
    if len(bio) <= limit:
        return bio
    return bio[:limit] + "..."


def render_connection_email(
    recipient_name: str | None,
    sender_name: str | None,
    sender_title: str | None,
    sender_organisation: str | None,
    sender_bio: str | None,
    connection_page_url: str,
    brand_name: str = "Codonyx",
    bio_preview_chars: int = 200,
) -> RenderedEmail:
    """Render the 'wants to connect' notification sent to a request receiver."""
    recipient = recipient_name or DEFAULT_RECIPIENT_NAME
    sender = sender_name or DEFAULT_SENDER_NAME
    subject = f"{sender} wants to connect with you on {brand_name}"

    html_parts = [
        f"<h2>New connection request on {escape(brand_name)}</h2>",
        f"<p>Hi {escape(recipient)},</p>",
        f"<p><strong>{escape(sender)}</strong> would like to connect with you.</p>",
    ]
    text_lines = [
        f"Hi {recipient},",
        "",
        f"{sender} would like to connect with you on {brand_name}.",
    ]

    if sender_title:
        html_parts.append(f"<p>{escape(sender_title)}</p>")
        text_lines.append(sender_title)
    if sender_organisation:
        html_parts.append(f"<p>{escape(sender_organisation)}</p>")
        text_lines.append(sender_organisation)
    if sender_bio:
        preview = truncate_bio(sender_bio, bio_preview_chars)
        html_parts.append(f"<blockquote>{escape(preview)}</blockquote>")
        text_lines.extend(["", preview])

    html_parts.append(
        f'<p><a href="{escape(connection_page_url, quote=True)}">View connection request</a></p>'
    )
    text_lines.extend(["", f"View connection request: {connection_page_url}"])

    return RenderedEmail(
        subject=subject,
        body_html="\n".join(html_parts),
        body_text="\n".join(text_lines),
    )
