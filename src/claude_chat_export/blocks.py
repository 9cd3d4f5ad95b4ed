"""Render conversation content blocks as HTML fragments.

One renderer per block type, dispatched on the parsed model class. Rendering
is total: unknown tags, unknown tools and malformed payloads all produce a
placeholder or degraded output instead of an exception.
"""

import json
import logging
from html import escape
from urllib.parse import urlparse

from .highlight import highlight_syntax
from .markdown import parse_markdown
from .models import (
    CodeExecutionResultBlock, ContentBlock, ImageBlock, KnowledgeBlock,
    RedactedThinkingBlock, TextBlock, ThinkingBlock, ToolResultBlock,
    ToolUseBlock, UnknownBlock, WebSearchResult, WebSearchToolResultBlock,
)

logger = logging.getLogger(__name__)

UNSUPPORTED_BLOCK_TEXT = "This block is not supported"

ARTIFACT_TOOLS = frozenset({"create_artifact", "update_artifact", "rewrite_artifact"})
SEARCH_TOOLS = frozenset({"web_search", "brave_search"})
FETCH_TOOLS = frozenset({"web_fetch"})
CODE_TOOLS = frozenset({"code_execution", "execute_code"})


# =============================================================================
# ICONS
# =============================================================================

_SVG = '<svg width="{size}" height="{size}" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2">{body}</svg>'

ICON_THINKING = _SVG.format(size=16, body=(
    '<path d="M12 2a8 8 0 0 0-8 8c0 3.4 2.1 6.3 5 7.5V20a1 1 0 0 0 1 1h4a1 1 0 0 0 1-1v-2.5'
    'c2.9-1.2 5-4.1 5-7.5a8 8 0 0 0-8-8z"/><line x1="10" y1="22" x2="14" y2="22"/>'
)).replace("<svg ", '<svg class="thinking-icon" ', 1)
ICON_SEARCH = _SVG.format(size=16, body='<circle cx="11" cy="11" r="8"/><line x1="21" y1="21" x2="16.65" y2="16.65"/>')
ICON_SEARCH_SMALL = _SVG.format(size=14, body='<circle cx="11" cy="11" r="8"/><line x1="21" y1="21" x2="16.65" y2="16.65"/>')
ICON_FETCH = _SVG.format(size=16, body=(
    '<path d="M18 13v6a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2V8a2 2 0 0 1 2-2h6"/>'
    '<polyline points="15 3 21 3 21 9"/><line x1="10" y1="14" x2="21" y2="3"/>'
))
ICON_CODE = _SVG.format(size=16, body='<polyline points="16 18 22 12 16 6"/><polyline points="8 6 2 12 8 18"/>')
ICON_TOOL = _SVG.format(size=16, body=(
    '<path d="M14.7 6.3a1 1 0 0 0 0 1.4l1.6 1.6a1 1 0 0 0 1.4 0l3.77-3.77a6 6 0 0 1-7.94 7.94'
    'l-6.91 6.91a2.12 2.12 0 0 1-3-3l6.91-6.91a6 6 0 0 1 7.94-7.94l-3.76 3.76z"/>'
))
ICON_FILE = _SVG.format(size=16, body='<path d="M13 2H6a2 2 0 0 0-2 2v16a2 2 0 0 0 2 2h12a2 2 0 0 0 2-2V9z"/><polyline points="13 2 13 9 20 9"/>')


# =============================================================================
# HELPERS
# =============================================================================

def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def _hostname(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def _code_panel(code: str, lang: str) -> str:
    """A <pre class="code-block"> for raw (unescaped) code."""
    return (
        f'<pre class="code-block" data-lang="{escape(lang)}">'
        f'<code class="language-{escape(lang)}">{highlight_syntax(escape(code, quote=False), lang)}</code></pre>'
    )


def placeholder(label: str) -> str:
    """Inert placeholder for anything that cannot be rendered."""
    return f'<div class="unknown-block">[{escape(label)}]</div>'


# =============================================================================
# PROSE
# =============================================================================

def render_text(block: TextBlock) -> str:
    return f'<div class="text-block">{parse_markdown(block.text)}</div>'


def render_thinking(block: ThinkingBlock) -> str:
    return (
        '<details class="thinking-block">'
        f"<summary>{ICON_THINKING} Thinking</summary>"
        f'<div class="thinking-content">{parse_markdown(block.thinking)}</div>'
        "</details>"
    )


def render_redacted_thinking(block: RedactedThinkingBlock) -> str:
    return f'<div class="redacted-thinking">{ICON_THINKING} Thinking (redacted)</div>'


# =============================================================================
# TOOL USE
# =============================================================================

def render_artifact(block: ToolUseBlock) -> str:
    """Artifact panel: code view, plus a sandboxed preview for HTML artifacts."""
    inp = block.input
    title = str(inp.get("title") or "Artifact")
    content = str(inp.get("content") or "")
    artifact_type = str(inp.get("type") or "")
    lang = str(inp.get("language") or artifact_type or "text")
    is_html = lang == "html" or "html" in artifact_type

    parts = [
        f'<div class="artifact-block" data-artifact-type="{escape(lang)}">',
        '<div class="artifact-header">',
        ICON_FILE,
        f'<span class="artifact-title">{escape(title)}</span>',
        f'<span class="artifact-lang">{escape(lang)}</span>',
        "</div>",
    ]
    if is_html:
        parts.append(
            '<div class="artifact-tabs">'
            '<button class="artifact-tab active" data-tab="code">Code</button>'
            '<button class="artifact-tab" data-tab="preview">Preview</button>'
            "</div>"
        )
    parts.append(f'<div class="artifact-content artifact-code-view">{_code_panel(content, lang)}</div>')
    if is_html:
        parts.append(
            '<div class="artifact-content artifact-preview-view" style="display:none">'
            f'<iframe sandbox="allow-scripts" srcdoc="{escape(content)}"></iframe></div>'
        )
    parts.append("</div>")
    return "".join(parts)


def _status_line(icon: str, label: str) -> str:
    return (
        '<div class="tool-block search-query-block">'
        f'<div class="tool-header">{icon} {escape(label)}</div>'
        "</div>"
    )


def render_tool_use(block: ToolUseBlock) -> str:
    """Dispatch on tool name; unknown tools get a generic input dump."""
    name = block.name or "unknown"
    inp = block.input

    if name in ARTIFACT_TOOLS:
        return render_artifact(block)

    if name in SEARCH_TOOLS:
        query = inp.get("query") or inp.get("q") or json.dumps(inp, default=str)
        return _status_line(ICON_SEARCH, f'Searching: "{query}"')

    if name in FETCH_TOOLS:
        return _status_line(ICON_FETCH, block.message or f"Fetching: {inp.get('url') or ''}")

    if name in CODE_TOOLS:
        code = inp.get("code") or inp.get("source") or json.dumps(inp, indent=2, default=str)
        lang = str(inp.get("language") or "python")
        return (
            '<div class="tool-block code-exec-block">'
            f'<div class="tool-header">{ICON_CODE} Code Execution</div>'
            f"{_code_panel(str(code), lang)}"
            "</div>"
        )

    dump = json.dumps(inp, indent=2, ensure_ascii=False, default=str)
    return (
        '<div class="tool-block">'
        f'<div class="tool-header">{ICON_TOOL} {escape(name)}</div>'
        '<details class="tool-input-details"><summary>Input</summary>'
        f'<pre class="tool-input"><code>{escape(dump)}</code></pre>'
        "</details></div>"
    )


# =============================================================================
# RESULTS
# =============================================================================

def render_search_result_card(result: WebSearchResult) -> str:
    url = result.url or "#"
    title = result.title or url
    age = f' <span class="result-age">{escape(result.page_age)}</span>' if result.page_age else ""
    domain = _hostname(url) or url
    return (
        f'<a class="search-result-card" href="{escape(url)}" target="_blank" rel="noopener">'
        f'<div class="result-title">{escape(title)}</div>'
        f'<div class="result-url">{escape(domain)}{age}</div>'
        "</a>"
    )


def render_knowledge(block: KnowledgeBlock) -> str:
    """Link card when a URL is known, inline reference otherwise."""
    domain = block.site_domain or (_hostname(block.url) if block.url else "")
    favicon = (
        f'<img class="result-favicon" src="{escape(block.favicon_url)}" width="14" height="14" alt="">'
        if block.favicon_url else ""
    )
    if block.url:
        return (
            f'<a class="search-result-card" href="{escape(block.url)}" target="_blank" rel="noopener">'
            f'<div class="result-title">{favicon} {escape(block.title)}</div>'
            f'<div class="result-url">{escape(block.site_name or domain)}</div>'
            "</a>"
        )
    return f'<div class="knowledge-ref">{favicon} {escape(block.title)}</div>'


def _sources_list(cards: list[str], collapsible: bool) -> str:
    tag = "details" if collapsible else "div"
    header_tag = "summary" if collapsible else "div"
    return (
        f'<{tag} class="search-results-block">'
        f'<{header_tag} class="search-results-header">{ICON_SEARCH_SMALL} {_plural(len(cards), "source")} found</{header_tag}>'
        f'<div class="search-results-list">{"".join(cards)}</div>'
        f"</{tag}>"
    )


def _rich_link(display: dict | None) -> KnowledgeBlock | None:
    if not display or display.get("type") != "rich_link" or not isinstance(display.get("link"), dict):
        return None
    link = display["link"]
    return KnowledgeBlock.from_dict({
        "title": link.get("title"),
        "url": link.get("url"),
        "metadata": {"favicon_url": link.get("icon_url"), "site_name": link.get("source")},
    })


def render_tool_result(block: ToolResultBlock) -> str:
    """Render a tool result.

    Results holding knowledge blocks become a collapsible source list; other
    nested blocks are rendered one by one. Empty results fall back to the
    rich-link display hint, then to the status message, then to nothing.
    """
    error_class = " tool-error" if block.is_error else ""
    content = block.content

    if isinstance(content, tuple) and content:
        knowledge = [c for c in content if isinstance(c, KnowledgeBlock)]
        if knowledge:
            return _sources_list([render_knowledge(k) for k in knowledge], collapsible=True)

        parts = []
        for item in content:
            if isinstance(item, TextBlock):
                parts.append(f'<div class="tool-result{error_class}">{parse_markdown(item.text)}</div>')
            elif isinstance(item, ImageBlock):
                parts.append(render_image(item))
            elif isinstance(item, WebSearchResult):
                parts.append(render_search_result_card(item))
            else:
                label = item.type_name if isinstance(item, UnknownBlock) else item.type
                parts.append(f'<div class="tool-result">[{escape(label)}]</div>')
        return "\n".join(parts)

    if not content:
        link = _rich_link(block.display_content)
        if link is not None:
            return render_knowledge(link)
        if block.message:
            return f'<div class="tool-result{error_class}">{parse_markdown(block.message)}</div>'
        return ""

    return f'<div class="tool-result{error_class}">{parse_markdown(content)}</div>'


def render_web_search_result(block: WebSearchToolResultBlock) -> str:
    if block.is_error:
        message = block.error_message or block.error_code or "Unknown error"
        return f'<div class="tool-result tool-error">Search error: {escape(message)}</div>'
    if not block.results:
        return ""
    return _sources_list([render_search_result_card(r) for r in block.results], collapsible=False)


def render_code_execution_result(block: CodeExecutionResultBlock) -> str:
    sections = (
        ("exec-output", "Output", block.output),
        ("exec-return", "Return", block.return_value),
        ("exec-error", "Error", block.error),
    )
    parts = ['<div class="code-exec-result">']
    for css_class, label, value in sections:
        if value:
            parts.append(
                f'<div class="{css_class}"><div class="exec-label">{label}</div>'
                f"<pre><code>{escape(value)}</code></pre></div>"
            )
    parts.append("</div>")
    return "".join(parts)


def render_image(block: ImageBlock) -> str:
    source = block.source
    if source.get("type") == "base64" and source.get("data"):
        media_type = escape(str(source.get("media_type") or "image/png"))
        return f'<img class="message-image" src="data:{media_type};base64,{escape(str(source["data"]))}" alt="Image">'
    if source.get("url"):
        return f'<img class="message-image" src="{escape(str(source["url"]))}" alt="Image">'
    return placeholder("Image")


# =============================================================================
# DISPATCH
# =============================================================================

def render_block(block: ContentBlock) -> str:
    """Render a single content block."""
    if isinstance(block, TextBlock):
        return render_text(block)
    elif isinstance(block, ThinkingBlock):
        return render_thinking(block)
    elif isinstance(block, RedactedThinkingBlock):
        return render_redacted_thinking(block)
    elif isinstance(block, ToolUseBlock):
        return render_tool_use(block)
    elif isinstance(block, ToolResultBlock):
        return render_tool_result(block)
    elif isinstance(block, WebSearchToolResultBlock):
        return render_web_search_result(block)
    elif isinstance(block, WebSearchResult):
        return render_search_result_card(block)
    elif isinstance(block, CodeExecutionResultBlock):
        return render_code_execution_result(block)
    elif isinstance(block, ImageBlock):
        return render_image(block)
    elif isinstance(block, KnowledgeBlock):
        return render_knowledge(block)
    else:
        label = block.type_name if isinstance(block, UnknownBlock) else type(block).__name__
        logger.debug("No renderer for block type %r", label)
        return placeholder(label)


def _is_unsupported_stub(block: ContentBlock) -> bool:
    return isinstance(block, TextBlock) and UNSUPPORTED_BLOCK_TEXT in block.text


def render_content_blocks(blocks: tuple[ContentBlock, ...] | list[ContentBlock]) -> str:
    """Render a message's content blocks, one fragment per line.

    Text blocks carrying the service's "not supported" stub are dropped.
    A block whose renderer fails is logged and replaced by a placeholder.
    """
    parts: list[str] = []
    for block in blocks:
        if _is_unsupported_stub(block):
            continue
        try:
            parts.append(render_block(block))
        except Exception:
            label = getattr(block, "type", None) or getattr(block, "type_name", "block")
            logger.exception("Failed to render %s block", label)
            parts.append(placeholder(str(label)))
    return "\n".join(parts)
