"""
Claude Chat Export Data Models
==============================

Data models for conversations returned by the claude.ai chat API
(`chat_conversations/<uuid>?rendering_mode=messages&render_all_tools=true`),
used to render a conversation as a standalone HTML document.

JSON STRUCTURE OVERVIEW
-----------------------

A conversation is a single JSON object:

    {"uuid": "...", "name": "...", "model": "...", "created_at": "...",
     "chat_messages": [...]}

Each chat message carries an `index` (messages are NOT guaranteed to arrive
in index order), a `sender` ("human" or "assistant") and a `content` list of
typed content blocks. Older exports only have a flat `text` field.

    {"index": 0, "sender": "human", "text": "hi", "content": [
        {"type": "text", "text": "hi"}
     ],
     "files_v2": [{"file_name": "a.png", "file_kind": "image", "file_uuid": "..."}],
     "attachments": [{"file_name": "notes.txt", "extracted_content": "...", "file_size": 120}]}

CONTENT BLOCKS
--------------

    text, thinking, redacted_thinking, tool_use, server_tool_use, tool_result,
    web_search_tool_result, code_execution_tool_result, image, knowledge

Anything else is kept as an UnknownBlock so that it can still be rendered as
a labeled placeholder.

PARSING IS TOTAL
----------------

Every `from_dict` accepts arbitrary input. Missing keys, wrong types and
non-mapping items degrade to defaults; nothing here raises on bad data except
`load_conversation`, which reports unreadable files.

Example:

    from claude_chat_export.models import load_conversation

    conversation = load_conversation("conversation.json")
    for message in conversation.messages:
        print(message.index, message.sender, len(message.content))
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar


class ConversationLoadError(Exception):
    """Raised when a conversation export cannot be read or decoded."""
    pass


# =============================================================================
# COERCION HELPERS
# =============================================================================

def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> str:
    """Coerce a JSON scalar to str; None and containers become ''."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


# =============================================================================
# CONTENT BLOCKS (inside chat_message.content)
# =============================================================================

@dataclass(frozen=True)
class TextBlock:
    """Prose from the user or Claude, in markdown."""
    type: ClassVar[str] = "text"
    text: str

    @classmethod
    def from_dict(cls, d: dict) -> "TextBlock":
        return cls(text=_text(d.get("text")))


@dataclass(frozen=True)
class ThinkingBlock:
    """Claude's reasoning trace (extended thinking)."""
    type: ClassVar[str] = "thinking"
    thinking: str

    @classmethod
    def from_dict(cls, d: dict) -> "ThinkingBlock":
        return cls(thinking=_text(d.get("thinking")) or _text(d.get("text")))


@dataclass(frozen=True)
class RedactedThinkingBlock:
    """Reasoning that was encrypted by the service; nothing is recoverable."""
    type: ClassVar[str] = "redacted_thinking"

    @classmethod
    def from_dict(cls, d: dict) -> "RedactedThinkingBlock":
        return cls()


@dataclass(frozen=True)
class ToolUseBlock:
    """Tool invocation by Claude (client or server side)."""
    type: ClassVar[str] = "tool_use"
    name: str  # e.g. "web_search", "create_artifact", "code_execution"
    input: dict  # Tool-specific input parameters
    id: str = ""
    message: str = ""  # Status line shown by the chat UI, e.g. "Fetching: ..."
    server: bool = False  # True for server_tool_use

    @classmethod
    def from_dict(cls, d: dict) -> "ToolUseBlock":
        return cls(
            name=_text(d.get("name")),
            input=_mapping(d.get("input")),
            id=_text(d.get("id")),
            message=_text(d.get("message")),
            server=d.get("type") == "server_tool_use",
        )


@dataclass(frozen=True)
class WebSearchResult:
    """A single hit inside a web search result list."""
    type: ClassVar[str] = "web_search_result"
    title: str
    url: str
    page_age: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "WebSearchResult":
        return cls(
            title=_text(d.get("title")),
            url=_text(d.get("url")),
            page_age=_text(d.get("page_age")),
        )


@dataclass(frozen=True)
class KnowledgeBlock:
    """A citation/source reference produced by web search or fetch."""
    type: ClassVar[str] = "knowledge"
    title: str
    url: str = ""
    site_name: str = ""
    site_domain: str = ""
    favicon_url: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "KnowledgeBlock":
        meta = _mapping(d.get("metadata"))
        return cls(
            title=_text(d.get("title")) or _text(d.get("name")) or "Source",
            url=_text(d.get("url")),
            site_name=_text(meta.get("site_name")),
            site_domain=_text(meta.get("site_domain")),
            favicon_url=_text(meta.get("favicon_url")),
        )


@dataclass(frozen=True)
class ImageBlock:
    """Image content (pasted screenshots, tool output)."""
    type: ClassVar[str] = "image"
    source: dict  # {"type": "base64", "media_type": "image/png", "data": "..."} or {"url": "..."}

    @classmethod
    def from_dict(cls, d: dict) -> "ImageBlock":
        return cls(source=_mapping(d.get("source")))


@dataclass(frozen=True)
class ToolResultBlock:
    """Result of a tool execution.

    `content` is either a tuple of nested content blocks or a bare string.
    When it is empty the chat UI falls back to `display_content` (a rich link)
    or `message`.
    """
    type: ClassVar[str] = "tool_result"
    content: "tuple[ContentBlock, ...] | str"
    is_error: bool = False
    name: str = ""
    message: str = ""
    display_content: dict | None = None
    tool_use_id: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "ToolResultBlock":
        raw = d.get("content")
        if isinstance(raw, list):
            content = tuple(parse_content_block(item) for item in raw)
        else:
            content = _text(raw)
        display = d.get("display_content")
        return cls(
            content=content,
            is_error=bool(d.get("is_error", False)),
            name=_text(d.get("name")),
            message=_text(d.get("message")),
            display_content=display if isinstance(display, dict) else None,
            tool_use_id=_text(d.get("tool_use_id")),
        )


@dataclass(frozen=True)
class WebSearchToolResultBlock:
    """Server-side web search result: a list of hits, or an error."""
    type: ClassVar[str] = "web_search_tool_result"
    results: tuple[WebSearchResult, ...] = ()
    error_code: str = ""
    error_message: str = ""
    is_error: bool = False

    @classmethod
    def from_dict(cls, d: dict) -> "WebSearchToolResultBlock":
        raw = d.get("content")
        if isinstance(raw, list):
            results = tuple(
                WebSearchResult.from_dict(item)
                for item in raw
                if isinstance(item, dict) and item.get("type") == "web_search_result"
            )
            return cls(results=results)
        if isinstance(raw, dict) and raw.get("type") in ("web_search_error", "web_search_tool_result_error"):
            return cls(
                error_code=_text(raw.get("error_code")),
                error_message=_text(raw.get("error_message")),
                is_error=True,
            )
        return cls()


@dataclass(frozen=True)
class CodeExecutionResultBlock:
    """Output of the sandboxed code execution tool."""
    type: ClassVar[str] = "code_execution_tool_result"
    output: str = ""
    return_value: str = ""
    error: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "CodeExecutionResultBlock":
        # Fields live either on the block itself or in a nested content mapping
        src = d if any(k in d for k in ("output", "return_value", "error")) else _mapping(d.get("content"))
        return cls(
            output=_text(src.get("output")) or _text(src.get("stdout")),
            return_value=_text(src.get("return_value")),
            error=_text(src.get("error")) or _text(src.get("stderr")),
        )


@dataclass(frozen=True)
class UnknownBlock:
    """Any block whose tag is not recognized. Rendered as an inert placeholder."""
    type_name: str
    raw: Any = None


ContentBlock = (
    TextBlock | ThinkingBlock | RedactedThinkingBlock | ToolUseBlock | ToolResultBlock
    | WebSearchToolResultBlock | WebSearchResult | CodeExecutionResultBlock
    | ImageBlock | KnowledgeBlock | UnknownBlock
)


_BLOCK_TYPES: dict[str, type] = {
    "text": TextBlock,
    "thinking": ThinkingBlock,
    "redacted_thinking": RedactedThinkingBlock,
    "tool_use": ToolUseBlock,
    "server_tool_use": ToolUseBlock,
    "tool_result": ToolResultBlock,
    "web_search_tool_result": WebSearchToolResultBlock,
    "web_search_result": WebSearchResult,
    "code_execution_tool_result": CodeExecutionResultBlock,
    "image": ImageBlock,
    "knowledge": KnowledgeBlock,
}


def parse_content_block(d: Any) -> ContentBlock:
    """Parse a content block dict into the appropriate type."""
    if not isinstance(d, dict):
        return UnknownBlock(type_name=type(d).__name__, raw=d)
    block_type = _text(d.get("type"))
    block_cls = _BLOCK_TYPES.get(block_type)
    if block_cls is None:
        return UnknownBlock(type_name=block_type or "unknown", raw=d)
    return block_cls.from_dict(d)


# =============================================================================
# UPLOADS AND ATTACHMENTS
# =============================================================================

@dataclass(frozen=True)
class UploadedFile:
    """A binary file uploaded with a message (image, PDF, ...).

    The binary payload is not part of the export; it is resolved separately
    into a uuid -> data reference lookup (see attachments.py).
    """
    name: str
    kind: str  # "image", "document" or anything else
    uuid: str
    page_count: int | None = None
    preview_url: str = ""
    thumbnail_url: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "UploadedFile":
        d = _mapping(d)
        preview = _text(d.get("preview_url")) or _text(_mapping(d.get("preview_asset")).get("url"))
        thumbnail = _text(d.get("thumbnail_url")) or _text(_mapping(d.get("thumbnail_asset")).get("url"))
        return cls(
            name=_text(d.get("file_name")) or "file",
            kind=_text(d.get("file_kind")),
            uuid=_text(d.get("file_uuid")),
            page_count=_int_or_none(_mapping(d.get("document_asset")).get("page_count")),
            preview_url=preview,
            thumbnail_url=thumbnail,
        )


@dataclass(frozen=True)
class TextAttachment:
    """A pasted or attached text file whose content was extracted server-side."""
    name: str
    extracted_text: str = ""
    size_bytes: int | None = None

    @classmethod
    def from_dict(cls, d: dict) -> "TextAttachment":
        d = _mapping(d)
        return cls(
            name=_text(d.get("file_name")) or _text(d.get("filename")) or "attachment",
            extracted_text=_text(d.get("extracted_content")),
            size_bytes=_int_or_none(d.get("file_size")),
        )


# =============================================================================
# MESSAGE AND CONVERSATION
# =============================================================================

@dataclass(frozen=True)
class Message:
    """A single chat message."""
    index: int
    sender: str  # "human" or "assistant"
    content: tuple[ContentBlock, ...] = ()
    text: str = ""  # Flat text fallback for exports without content blocks
    files: tuple[UploadedFile, ...] = ()
    attachments: tuple[TextAttachment, ...] = ()
    uuid: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> "Message":
        d = _mapping(d)
        raw_content = d.get("content")
        if isinstance(raw_content, str) and raw_content:
            content: tuple[ContentBlock, ...] = (TextBlock(text=raw_content),)
        elif isinstance(raw_content, list):
            content = tuple(parse_content_block(block) for block in raw_content)
        else:
            content = ()

        raw_files = d.get("files_v2") or d.get("files") or []
        raw_attachments = d.get("attachments") or []

        return cls(
            index=_int_or_none(d.get("index")) or 0,
            sender=_text(d.get("sender")) or "unknown",
            content=content,
            text=_text(d.get("text")),
            files=tuple(UploadedFile.from_dict(f) for f in raw_files if isinstance(f, dict))
            if isinstance(raw_files, list) else (),
            attachments=tuple(TextAttachment.from_dict(a) for a in raw_attachments if isinstance(a, dict))
            if isinstance(raw_attachments, list) else (),
            uuid=_text(d.get("uuid")),
            created_at=_text(d.get("created_at")),
        )


@dataclass(frozen=True)
class Conversation:
    """A whole conversation export."""
    uuid: str = ""
    name: str = ""
    model: str = ""
    created_at: str = ""
    messages: tuple[Message, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, d: dict) -> "Conversation":
        d = _mapping(d)
        raw_messages = d.get("chat_messages")
        if not isinstance(raw_messages, list):
            raw_messages = []
        return cls(
            uuid=_text(d.get("uuid")),
            name=_text(d.get("name")),
            model=_text(d.get("model")),
            created_at=_text(d.get("created_at")),
            messages=tuple(Message.from_dict(m) for m in raw_messages if isinstance(m, dict)),
        )


# =============================================================================
# CONVENIENCE PARSER
# =============================================================================

def load_conversation(json_path: str | Path) -> Conversation:
    """
    Load a conversation export (JSON) from disk.

    Args:
        json_path: Path to the exported conversation .json file

    Returns:
        The parsed Conversation

    Raises:
        ConversationLoadError: if the file cannot be read or is not a JSON object
    """
    try:
        with open(json_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConversationLoadError(f"Cannot read {json_path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise ConversationLoadError(f"{json_path} is not valid JSON: {e.msg} (line {e.lineno})") from e

    if not isinstance(data, dict):
        raise ConversationLoadError(f"{json_path} does not contain a conversation object")

    return Conversation.from_dict(data)


def list_conversation_files(export_dir: Path) -> list[Path]:
    """List *.json files in an export directory, sorted oldest first."""
    return sorted(export_dir.glob("*.json"), key=lambda p: p.stat().st_mtime)
