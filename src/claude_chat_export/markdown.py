"""Markdown to HTML for message text.

A fixed, pragmatic subset: fenced and inline code, headings, rules,
blockquotes, flat lists, pipe tables and paragraphs, with emphasis,
strikethrough and links inside lines. Constructs never nest.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from html import escape

from .highlight import highlight_syntax


# =============================================================================
# INLINE FORMATTING
# =============================================================================

# Applied in this order; each pass sees the output of the previous ones.
_INLINE_PASSES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"\*\*\*(.+?)\*\*\*"), r"<strong><em>\1</em></strong>"),
    (re.compile(r"___(.+?)___"), r"<strong><em>\1</em></strong>"),
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"__(.+?)__"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.+?)\*"), r"<em>\1</em>"),
    (re.compile(r"_(.+?)_"), r"<em>\1</em>"),
    (re.compile(r"~~(.+?)~~"), r"<del>\1</del>"),
)

_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_JAVASCRIPT_URL = re.compile(r"^\s*javascript:", re.IGNORECASE)


def _render_link(m: re.Match) -> str:
    link_text, url = m.group(1), m.group(2)
    if _JAVASCRIPT_URL.match(url):
        return link_text
    href = url.replace('"', "&quot;")
    return f'<a href="{href}" target="_blank" rel="noopener">{link_text}</a>'


def inline_format(text: str) -> str:
    """Apply emphasis, strikethrough and links to one escaped line.

    No escaping happens here: the caller escapes `&`, `<` and `>` first.
    `javascript:` links are reduced to their text.
    """
    for pattern, replacement in _INLINE_PASSES:
        text = pattern.sub(replacement, text)
    return _LINK.sub(_render_link, text)


# =============================================================================
# CODE EXTRACTION
# =============================================================================

_FENCE = re.compile(r"```([^\n`]*?)\n([\s\S]*?)```")
_INLINE_CODE = re.compile(r"`([^`\n]+)`")

# Placeholders keep code opaque to every line and inline rule.
_FENCE_TOKEN = "\x00F{}\x00"
_CODE_TOKEN = "\x00C{}\x00"
_PLACEHOLDER = re.compile(r"\x00([FC])(\d+)\x00")


def render_code_block(code: str, lang: str) -> str:
    """Render already-escaped code as a highlighted <pre> block.

    `lang` comes from the same escaped text, so only quotes are left to
    neutralize for the attribute.
    """
    lang = lang.strip()
    attr = lang.replace('"', "&quot;")
    return (
        f'<pre class="code-block" data-lang="{attr}">'
        f'<code class="language-{attr or "text"}">{highlight_syntax(code, lang)}</code></pre>'
    )


@dataclass
class _Extracted:
    fences: list[str] = field(default_factory=list)
    codes: list[str] = field(default_factory=list)

    def stash_fence(self, m: re.Match) -> str:
        self.fences.append(render_code_block(m.group(2).strip(), m.group(1)))
        return _FENCE_TOKEN.format(len(self.fences) - 1)

    def stash_code(self, m: re.Match) -> str:
        # A fence may sit between two backticks on one line
        self.codes.append(f'<code class="inline-code">{self.restore(m.group(1))}</code>')
        return _CODE_TOKEN.format(len(self.codes) - 1)

    def restore(self, text: str) -> str:
        def _sub(m: re.Match) -> str:
            pool = self.fences if m.group(1) == "F" else self.codes
            index = int(m.group(2))
            return pool[index] if index < len(pool) else ""
        return _PLACEHOLDER.sub(_sub, text)


# =============================================================================
# BLOCK PARSER
# =============================================================================

class Construct(Enum):
    """Multi-line constructs. At most one is open at any time."""
    LIST = "ul"
    ORDERED_LIST = "ol"
    BLOCKQUOTE = "blockquote"
    TABLE = "table"


@dataclass
class ParseState:
    """Line-scan state for one parse_markdown call."""
    open: Construct | None = None
    table_rows: list[list[str]] = field(default_factory=list)
    out: list[str] = field(default_factory=list)

    @property
    def in_list(self) -> bool:
        return self.open is Construct.LIST

    @property
    def in_ordered_list(self) -> bool:
        return self.open is Construct.ORDERED_LIST

    @property
    def in_blockquote(self) -> bool:
        return self.open is Construct.BLOCKQUOTE

    @property
    def in_table(self) -> bool:
        return self.open is Construct.TABLE

    def close(self) -> None:
        """Emit the closing markup of the open construct, if any."""
        if self.open is Construct.TABLE:
            table = _render_table(self.table_rows)
            if table:
                self.out.append(table)
            self.table_rows = []
        elif self.open is not None:
            self.out.append(f"</{self.open.value}>")
        self.open = None

    def enter(self, construct: Construct) -> None:
        """Make `construct` the open one, closing any other first."""
        if self.open is construct:
            return
        self.close()
        self.open = construct
        if construct is not Construct.TABLE:
            self.out.append(f"<{construct.value}>")

    def emit(self, fragment: str) -> None:
        """Emit a standalone block, closing any open construct first."""
        self.close()
        self.out.append(fragment)


def _render_table(rows: list[list[str]]) -> str:
    if not rows:
        return ""
    head = "".join(f"<th>{c}</th>" for c in rows[0])
    body = "".join(
        "<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>"
        for row in rows[1:]
    )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


_TABLE_ROW = re.compile(r"^\|.*\|$")
_TABLE_SEPARATOR = re.compile(r"^\|[\s\-:|]+\|$")
_HEADING = re.compile(r"^(#{1,6})\s+(.+)$")
_RULE = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")
_BLOCKQUOTE = re.compile(r"^&gt;\s?")
_BULLET = re.compile(r"^\s*[-*+]\s+")
_NUMBERED = re.compile(r"^\s*\d+\.\s+")


def _scan_line(state: ParseState, line: str) -> None:
    """Feed one line to the state machine. First matching rule wins."""
    if "\x00F" in line:
        state.emit(line)
        return

    row = line.rstrip()
    if _TABLE_ROW.match(row):
        state.enter(Construct.TABLE)
        if not _TABLE_SEPARATOR.match(row):
            state.table_rows.append([inline_format(c.strip()) for c in row.split("|")[1:-1]])
        return

    m = _HEADING.match(line)
    if m:
        level = len(m.group(1))
        state.emit(f"<h{level}>{inline_format(m.group(2))}</h{level}>")
        return

    if _RULE.match(line):
        state.emit("<hr>")
        return

    if _BLOCKQUOTE.match(line):
        state.enter(Construct.BLOCKQUOTE)
        state.out.append(f"<p>{inline_format(_BLOCKQUOTE.sub('', line, count=1))}</p>")
        return

    if _BULLET.match(line):
        state.enter(Construct.LIST)
        state.out.append(f"<li>{inline_format(_BULLET.sub('', line, count=1))}</li>")
        return

    if _NUMBERED.match(line):
        state.enter(Construct.ORDERED_LIST)
        state.out.append(f"<li>{inline_format(_NUMBERED.sub('', line, count=1))}</li>")
        return

    if not line.strip():
        # Lists continue across blank lines; anything else ends here.
        if not (state.in_list or state.in_ordered_list):
            state.close()
        return

    state.emit(f"<p>{inline_format(line)}</p>")


def parse_markdown(text: str) -> str:
    """Convert markdown text to HTML.

    The input is escaped here; code is extracted before the line scan and
    restored afterwards. Never raises on malformed input.
    """
    if not text:
        return ""

    text = text.replace("\x00", "").replace("\r\n", "\n").replace("\r", "\n")
    html = escape(text, quote=False)

    extracted = _Extracted()
    html = _FENCE.sub(extracted.stash_fence, html)
    html = _INLINE_CODE.sub(extracted.stash_code, html)

    state = ParseState()
    for line in html.split("\n"):
        _scan_line(state, line)
    state.close()

    return extracted.restore("\n".join(state.out))
