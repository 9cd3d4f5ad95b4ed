#!/usr/bin/env python3
"""Textual TUI for browsing a directory of conversation exports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from rich.console import Group
from rich.panel import Panel
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.theme import Theme
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from .conversation import (
    default_output_path, export_conversation, fmt_date, parse_timestamp, sort_messages,
)
from .models import (
    ConversationLoadError, Message, TextBlock, ThinkingBlock, ToolUseBlock,
    list_conversation_files, load_conversation,
)


# =============================================================================
# SHARED
# =============================================================================

_THEME = Theme(
    name="claude-chat-export",
    primary="rgb(201, 100, 66)",
    accent="rgb(201, 100, 66)",
    background="rgb(33, 33, 33)",
    surface="rgb(33, 33, 33)",
    panel="rgb(33, 33, 33)",
    dark=True,
)

_RUN = dict(inline=True, mouse=True)

_BASE_CSS = """
Screen {
    height: auto;
    padding: 0 1;
    border-top: tall $primary;
    border-bottom: tall $primary;
}
Static {
    background: $background;
}
#title {
    color: $text-muted;
    margin-bottom: 1;
}
OptionList {
    height: auto;
    border: none;
    background: $background;
    padding: 0;
}
OptionList > .option-list--option-highlighted {
    background: $background;
    text-style: bold;
}
"""


class _BaseApp(App):
    """Base app with the exporter theme and shared settings."""

    INLINE_PADDING = 1
    CSS = _BASE_CSS
    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, system=True),
    ]

    def __init__(self, **kwargs) -> None:
        super().__init__(ansi_color=True, **kwargs)
        self.register_theme(_THEME)
        self.theme = "claude-chat-export"


# =============================================================================
# CONVERSATION METADATA
# =============================================================================

@dataclass(frozen=True)
class MessagePreview:
    """Preview of a single message for display."""
    sender: str  # "human", "assistant"
    text: str
    tool_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConversationInfo:
    """Lightweight metadata about an export file."""
    path: Path
    name: str
    message_count: int
    timestamp: datetime
    size_bytes: int
    previews: tuple[MessagePreview, ...] = ()  # first 2 + last 2

    def __hash__(self) -> int:
        return hash(self.path)


def message_preview(message: Message) -> MessagePreview:
    """Condense a message to its first prose and the tools it called."""
    text = ""
    for block in message.content:
        if isinstance(block, TextBlock) and block.text.strip():
            text = block.text.strip()
            break
    if not text:
        text = message.text.strip()
    if not text:
        thinking = [b for b in message.content if isinstance(b, ThinkingBlock)]
        if thinking:
            text = "[thinking] " + thinking[0].thinking.strip()
    tools = tuple(b.name for b in message.content if isinstance(b, ToolUseBlock))
    return MessagePreview(sender=message.sender, text=text, tool_names=tools)


def scan_conversation(json_path: Path) -> ConversationInfo:
    """Load an export and keep only what the picker shows.

    Raises ConversationLoadError for unreadable files.
    """
    conversation = load_conversation(json_path)
    messages = sort_messages(conversation.messages)
    picked = messages if len(messages) <= 4 else messages[:2] + messages[-2:]
    timestamp = parse_timestamp(conversation.created_at)
    if timestamp is None:
        timestamp = datetime.fromtimestamp(json_path.stat().st_mtime).astimezone()
    elif timestamp.tzinfo is None:
        timestamp = timestamp.astimezone()

    return ConversationInfo(
        path=json_path,
        name=conversation.name or json_path.stem,
        message_count=len(messages),
        timestamp=timestamp,
        size_bytes=json_path.stat().st_size,
        previews=tuple(message_preview(m) for m in picked),
    )


def scan_conversations(json_files: list[Path]) -> list[ConversationInfo]:
    """Scan all exports for metadata, sorted newest first. Unreadable files are skipped."""
    conversations = []
    for path in json_files:
        try:
            conversations.append(scan_conversation(path))
        except ConversationLoadError as e:
            print(f"  skipping {path.name}: {e}")
    conversations.sort(key=lambda c: c.timestamp, reverse=True)
    return conversations


# =============================================================================
# PREVIEW RENDERING
# =============================================================================

def _clip_preview(text: str, max_lines: int = 5, max_chars: int = 400) -> str:
    """Keep the opening of a message; note how much was cut."""
    lines = text.splitlines()
    if len(lines) > max_lines:
        return "\n".join(lines[:max_lines]) + f"\n... (+{len(lines) - max_lines} more lines)"
    if len(text) > max_chars:
        return text[:max_chars] + f"\n... (+{len(text) - max_chars} more characters)"
    return text


def _render_preview(preview: MessagePreview) -> Panel:
    """Render a MessagePreview as a Rich Panel."""
    is_human = preview.sender == "human"
    body = Text(_clip_preview(preview.text))
    if preview.tool_names:
        body.append(f"\n[tools: {', '.join(preview.tool_names)}]", style="dim")
    title = "[bold white]you[/bold white]" if is_human else "[#C96442]*[/#C96442] [bold white]claude[/bold white]"
    return Panel(
        body,
        title=title,
        title_align="left",
        border_style="grey50" if is_human else "#6F3A2B",
        padding=(0, 3),
    )


def _render_previews(previews: tuple[MessagePreview, ...], message_count: int) -> Group:
    """Render first 2 + last 2 message previews with a separator."""
    head = previews[:2]
    tail = previews[2:]
    between = message_count - len(previews)

    parts = [_render_preview(p) for p in head]
    if between > 0:
        parts.append(Text(""))
        parts.append(Text(f"< {between} other messages >", style="dim", justify="center"))
        parts.append(Text(""))
    parts.extend(_render_preview(p) for p in tail)
    return Group(*parts)


# =============================================================================
# TUI: PICKER
# =============================================================================

class ConversationPicker(_BaseApp):
    """Pick a conversation from the list."""

    CSS = _BASE_CSS + """
    OptionList {
        max-height: 20;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "quit", "Back"),
    ]

    def __init__(self, conversations: list[ConversationInfo]) -> None:
        super().__init__()
        self.conversations = conversations

    def compose(self) -> ComposeResult:
        yield Static("Select a conversation:", id="title")
        options = []
        for i, c in enumerate(self.conversations):
            date_str = fmt_date(c.timestamp)
            label = f"{date_str:<24} {c.message_count:>4} messages  {c.name[:60]}"
            options.append(Option(label, id=str(i)))
        yield OptionList(*options)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(event.option.id)


class ConversationAction(_BaseApp):
    """Pick what to do with a selected conversation."""

    CSS = _BASE_CSS + """
    #preview {
        margin-bottom: 1;
    }
    OptionList {
        max-height: 6;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "quit", "Back"),
    ]

    def __init__(self, conversation: ConversationInfo) -> None:
        super().__init__()
        self.conversation = conversation

    def compose(self) -> ComposeResult:
        c = self.conversation
        yield Static(f"{c.name}: {fmt_date(c.timestamp)} ({c.message_count} messages)", id="title")
        if c.previews:
            yield Static(_render_previews(c.previews, c.message_count), id="preview")
        yield OptionList(
            Option("Export to HTML", id="light"),
            Option("Export to HTML (dark theme)", id="dark"),
        )

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(event.option.id)


class InputPrompt(_BaseApp):
    """Prompt for a single text input."""

    CSS = _BASE_CSS + """
    Input {
        padding: 0 1;
    }
    """

    BINDINGS = [Binding("escape", "quit", "Cancel")]

    def __init__(self, title: str = "Enter value:", default: str = "", placeholder: str = "") -> None:
        super().__init__()
        self._title = title
        self._default = default
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        yield Static(self._title, id="title")
        yield Input(value=self._default, placeholder=self._placeholder)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        self.exit(value if value else None)


# =============================================================================
# ENTRY POINT (called from cli.py)
# =============================================================================

def _handle_action(info: ConversationInfo, assets_dir: Path | None) -> None:
    theme = ConversationAction(info).run(**_RUN)
    if theme is None:
        return

    conversation = load_conversation(info.path)
    out_path = InputPrompt(
        title="Save HTML file to:",
        default=str(default_output_path(conversation, Path.cwd().resolve())),
    ).run(**_RUN)
    if not out_path:
        return
    target = export_conversation(info.path, out_path, assets_dir=assets_dir, theme=theme)
    print(f"Written to {target}")


def run_browser(export_dir: Path, assets_dir: Path | None = None) -> None:
    """Run the interactive picker over every export in a directory."""
    json_files = list_conversation_files(export_dir)
    if not json_files:
        print(f"No conversation exports found in {export_dir}")
        return

    print("Scanning conversations...", end="", flush=True)
    conversations = scan_conversations(json_files)
    print(f" {len(conversations)} found")

    while True:
        idx_str = ConversationPicker(conversations).run(**_RUN)
        if idx_str is None:
            return
        _handle_action(conversations[int(idx_str)], assets_dir)
