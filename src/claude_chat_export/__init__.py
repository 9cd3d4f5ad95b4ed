"""claude_chat_export - Render claude.ai conversation exports as self-contained HTML.

Library usage:
    from claude_chat_export import load_conversation, render_message, render_html
    from claude_chat_export import parse_markdown, highlight_syntax, export_conversation
"""

from .models import (
    # Content blocks
    TextBlock,
    ThinkingBlock,
    RedactedThinkingBlock,
    ToolUseBlock,
    ToolResultBlock,
    WebSearchResult,
    WebSearchToolResultBlock,
    CodeExecutionResultBlock,
    ImageBlock,
    KnowledgeBlock,
    UnknownBlock,
    ContentBlock,
    # Messages and conversations
    UploadedFile,
    TextAttachment,
    Message,
    Conversation,
    ConversationLoadError,
    # Core functions
    parse_content_block,
    load_conversation,
    list_conversation_files,
)

from .highlight import highlight_syntax, tokenize, TokenSpan
from .markdown import inline_format, parse_markdown
from .blocks import render_block, render_content_blocks
from .attachments import DirectoryFetcher, collect_attachment_requests, resolve_attachments
from .conversation import (
    render_message,
    render_messages,
    render_html,
    export_conversation,
    sanitize_filename,
)

__all__ = [
    # Content blocks
    "TextBlock", "ThinkingBlock", "RedactedThinkingBlock", "ToolUseBlock", "ToolResultBlock",
    "WebSearchResult", "WebSearchToolResultBlock", "CodeExecutionResultBlock", "ImageBlock",
    "KnowledgeBlock", "UnknownBlock", "ContentBlock",
    # Messages and conversations
    "UploadedFile", "TextAttachment", "Message", "Conversation", "ConversationLoadError",
    # Core functions
    "parse_content_block", "load_conversation", "list_conversation_files",
    # Rendering
    "highlight_syntax", "tokenize", "TokenSpan",
    "inline_format", "parse_markdown",
    "render_block", "render_content_blocks",
    "render_message", "render_messages", "render_html",
    # Attachments and export
    "DirectoryFetcher", "collect_attachment_requests", "resolve_attachments",
    "export_conversation", "sanitize_filename",
]
