#!/usr/bin/env python3
"""CLI entry point for claude-chat-export."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import logging_setup
from .conversation import export_conversation
from .models import ConversationLoadError, list_conversation_files
from .page import THEMES


def cmd_render(args: argparse.Namespace) -> Path | None:
    """Handle the render subcommand. Returns the written path."""
    source = Path(args.path)
    if source.is_dir():
        json_files = list_conversation_files(source)
        if not json_files:
            print(f"No conversation exports found in {source}", file=sys.stderr)
            sys.exit(1)
        out_dir = Path(args.output) if args.output else Path.cwd()
        rendered = 0
        for json_path in json_files:
            try:
                target = export_conversation(
                    json_path, out_dir / f"{json_path.stem}.html",
                    assets_dir=args.assets, theme=args.theme,
                )
            except ConversationLoadError as e:
                print(f"  skipping {json_path.name}: {e}", file=sys.stderr)
                continue
            rendered += 1
            print(f"  {target.name}")
        print(f"\nRendered {rendered} of {len(json_files)} conversations to {out_dir.resolve()}/")
        return out_dir

    target = export_conversation(source, args.output, assets_dir=args.assets, theme=args.theme)
    print(f"Written to {target}")
    return target


def cmd_browse(args: argparse.Namespace) -> None:
    """Handle the browse subcommand."""
    from .tui import run_browser
    run_browser(Path(args.export_dir), assets_dir=Path(args.assets) if args.assets else None)


USAGE = """\
usage: claude-chat-export render PATH [-o OUT] [--assets DIR] [--theme light|dark]
       claude-chat-export browse DIR [--assets DIR]

Render claude.ai conversation exports as self-contained HTML pages.

Commands:
  claude-chat-export render PATH       Render one export (or a directory of them)
  claude-chat-export browse DIR        Pick an export interactively (TUI)

Logging goes to stderr; set CLAUDE_CHAT_EXPORT_LOG_LEVEL=INFO or DEBUG for more.
Run 'claude-chat-export <command> --help' for command-specific options.
"""


def _parse_render(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="claude-chat-export render", description="Render exports as HTML")
    parser.add_argument("path", help="Conversation JSON file, or a directory of them")
    parser.add_argument("-o", "--output", default=None, help="Output file (or directory when PATH is a directory)")
    parser.add_argument("--assets", metavar="DIR", default=None, help="Directory of downloaded uploads to embed")
    parser.add_argument("--theme", choices=THEMES, default="light", help="Initial page theme")
    return parser.parse_args(argv)


def _parse_browse(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="claude-chat-export browse", description="Browse exports interactively")
    parser.add_argument("export_dir", help="Directory of conversation JSON files")
    parser.add_argument("--assets", metavar="DIR", default=None, help="Directory of downloaded uploads to embed")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv

    if not argv or argv[0] in ("-h", "--help"):
        print(USAGE)
        return

    logging_setup.configure()
    command = argv[0]

    try:
        if command == "render":
            cmd_render(_parse_render(argv[1:]))
        elif command == "browse":
            cmd_browse(_parse_browse(argv[1:]))
        else:
            # Bare: claude-chat-export FILE -> render with defaults
            cmd_render(_parse_render(argv))
    except ConversationLoadError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
