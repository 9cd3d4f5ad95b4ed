#!/usr/bin/env python3
"""Render a claude.ai conversation export as a single self-contained HTML page.

`render_message` is the core entry point; `render_html` wraps the rendered
messages in the page shell and `export_conversation` does the whole
load -> resolve attachments -> render -> write round trip.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from html import escape
from pathlib import Path

from .attachments import DirectoryFetcher, Fetcher, resolve_attachments
from .blocks import ICON_FILE, render_content_blocks
from .markdown import parse_markdown
from .models import Conversation, Message, TextAttachment, UploadedFile, load_conversation
from .page import CLAUDE_LOGO, HTML_TEMPLATE, STYLESHEET, THEMES, VIEWER_SCRIPT

logger = logging.getLogger(__name__)

AttachmentLookup = Mapping[str, str | None]

_ICON_PAPERCLIP = (
    '<svg width="14" height="14" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2">'
    '<path d="M21.44 11.05l-9.19 9.19a6 6 0 0 1-8.49-8.49l9.19-9.19a4 4 0 0 1 5.66 5.66l-9.2 9.19'
    'a2 2 0 0 1-2.83-2.83l8.49-8.48"/></svg>'
)


def _local_tz():
    """Get the current local timezone (computed fresh each call)."""
    return datetime.now().astimezone().tzinfo


# =============================================================================
# FORMATTING HELPERS
# =============================================================================

def fmt_date(dt: datetime) -> str:
    """Format datetime as 'Feb 4, 2026 4:16 PM' (no seconds, no timezone)."""
    local = dt.astimezone(_local_tz())
    month = local.strftime("%b")
    hour = local.hour % 12 or 12
    return f"{month} {local.day}, {local.year} {hour}:{local.strftime('%M')} {local.strftime('%p')}"


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp from the export; None if absent or malformed."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_file_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def sanitize_filename(name: str) -> str:
    """Turn a conversation title into a safe file stem."""
    cleaned = re.sub(r"[^a-zA-Z0-9_\-\s]", "", name or "")
    cleaned = re.sub(r"\s+", "-", cleaned)[:80]
    return cleaned or "claude-chat"


# =============================================================================
# UPLOADS AND ATTACHMENTS
# =============================================================================

def render_uploaded_file(file: UploadedFile, lookup: AttachmentLookup) -> str:
    """Render one uploaded file. A missing data reference degrades to the name."""
    data_uri = lookup.get(file.uuid) if file.uuid else None
    name = escape(file.name)

    if file.kind == "image" and data_uri:
        return (
            '<div class="uploaded-file uploaded-image">'
            f'<img src="{escape(data_uri)}" alt="{name}" loading="lazy">'
            f'<div class="uploaded-file-name">{name}</div>'
            "</div>"
        )

    if file.kind == "document":
        pages = ""
        if file.page_count:
            pages = f" ({file.page_count} page{'' if file.page_count == 1 else 's'})"
        thumb = f'<img class="doc-thumbnail" src="{escape(data_uri)}" alt="{name}">' if data_uri else ""
        return (
            '<div class="uploaded-file uploaded-doc">'
            f"{thumb}"
            f'<div class="uploaded-file-info">{ICON_FILE}<span>{name}{pages}</span></div>'
            "</div>"
        )

    return f'<div class="uploaded-file">{ICON_FILE}<span class="uploaded-file-name">{name}</span></div>'


def render_attachment(attachment: TextAttachment) -> str:
    """Collapsible full text when extracted content is present, a label otherwise."""
    size = f"({format_file_size(attachment.size_bytes)})" if attachment.size_bytes is not None else ""
    label = f'{escape(attachment.name)} <span class="att-size">{escape(size)}</span>'

    if attachment.extracted_text:
        return (
            '<details class="text-attachment">'
            f"<summary>{ICON_FILE} {label}</summary>"
            f'<div class="text-attachment-content"><pre>{escape(attachment.extracted_text)}</pre></div>'
            "</details>"
        )
    return f'<div class="attachment">{_ICON_PAPERCLIP} {label}</div>'


# =============================================================================
# MESSAGES
# =============================================================================

def render_message(message: Message, attachment_lookup: AttachmentLookup | None = None) -> str:
    """Render one message as HTML.

    `attachment_lookup` maps file uuids to data URIs (or None when the
    payload could not be resolved). It is read, never filled in here.
    """
    lookup = attachment_lookup or {}
    sender = message.sender or "unknown"
    is_human = sender == "human"

    if message.content:
        content_html = render_content_blocks(message.content)
    elif message.text:
        content_html = parse_markdown(message.text)
    else:
        content_html = ""

    files_html = ""
    if message.files:
        files_html = (
            '<div class="uploaded-files-grid">'
            + "\n".join(render_uploaded_file(f, lookup) for f in message.files)
            + "</div>"
        )
    attachments_html = "".join(render_attachment(a) for a in message.attachments)

    sender_class = escape(sender)
    avatar = "H" if is_human else CLAUDE_LOGO
    return (
        f'<div class="message message-{sender_class}">\n'
        f'<div class="message-avatar {sender_class}-avatar">{avatar}</div>\n'
        '<div class="message-body">\n'
        f'<div class="message-sender">{"You" if is_human else "Claude"}</div>\n'
        f"{files_html}{attachments_html}"
        f'<div class="message-content">{content_html}</div>\n'
        "</div>\n"
        "</div>"
    )


def sort_messages(messages: Iterable[Message]) -> list[Message]:
    """Messages in ascending index order (stable for equal indices)."""
    return sorted(messages, key=lambda m: m.index)


def render_messages(messages: Iterable[Message], attachment_lookup: AttachmentLookup | None = None) -> str:
    return "\n".join(render_message(m, attachment_lookup) for m in sort_messages(messages))


# =============================================================================
# DOCUMENT
# =============================================================================

def render_html(
    conversation: Conversation,
    attachment_lookup: AttachmentLookup | None = None,
    theme: str = "light",
) -> str:
    """Render a whole conversation as an HTML document."""
    if theme not in THEMES:
        logger.warning("Unknown theme %r, using light", theme)
        theme = "light"

    title = conversation.name or "Claude Conversation"
    created = parse_timestamp(conversation.created_at)
    meta_parts = [conversation.model or "claude"]
    if created is not None:
        meta_parts.append(fmt_date(created))

    return HTML_TEMPLATE.format(
        theme=theme,
        title=escape(title),
        css=STYLESHEET,
        logo=CLAUDE_LOGO,
        meta=" &middot; ".join(escape(p) for p in meta_parts),
        body=render_messages(conversation.messages, attachment_lookup),
        script=VIEWER_SCRIPT,
    )


# =============================================================================
# PUBLIC API
# =============================================================================

def default_output_path(conversation: Conversation, directory: Path | None = None) -> Path:
    return (directory or Path.cwd()) / f"{sanitize_filename(conversation.name)}.html"


def export_conversation(
    json_path: str | Path,
    output_path: str | Path | None = None,
    assets_dir: str | Path | None = None,
    theme: str = "light",
    fetch: Fetcher | None = None,
) -> Path:
    """Render a conversation export to an HTML file and return its path.

    Uploaded files are embedded from `assets_dir` (or a custom `fetch`)
    when given; otherwise they are shown by name only.
    """
    conversation = load_conversation(json_path)

    if fetch is None and assets_dir is not None:
        fetch = DirectoryFetcher(Path(assets_dir))
    lookup = resolve_attachments(conversation, fetch) if fetch is not None else {}

    target = Path(output_path) if output_path else default_output_path(conversation)
    text = render_html(conversation, lookup, theme=theme)

    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write(text)

    logger.info("Wrote %d messages to %s", len(conversation.messages), target)
    return target
