"""Tests for message rendering and document assembly."""

import pytest

from claude_chat_export.conversation import (
    default_output_path,
    export_conversation,
    format_file_size,
    parse_timestamp,
    render_html,
    render_message,
    render_messages,
    sanitize_filename,
)
from claude_chat_export.models import Conversation, Message


def _message(index: int, text: str, sender: str = "assistant", **extra) -> Message:
    return Message.from_dict({
        "index": index,
        "sender": sender,
        "content": [{"type": "text", "text": text}],
        **extra,
    })


# ─── render_message ────────────────────────────────────────────────────────


class TestRenderMessage:
    def test_human_wrapper(self):
        out = render_message(_message(0, "hi", sender="human"), {})
        assert out.startswith('<div class="message message-human">')
        assert '<div class="message-avatar human-avatar">H</div>' in out
        assert '<div class="message-sender">You</div>' in out
        assert '<div class="message-content"><div class="text-block"><p>hi</p></div></div>' in out

    def test_assistant_wrapper(self):
        out = render_message(_message(0, "hi"), {})
        assert 'class="message message-assistant"' in out
        assert '<div class="message-sender">Claude</div>' in out

    def test_text_fallback_when_no_blocks(self):
        m = Message.from_dict({"index": 0, "sender": "human", "text": "plain **text**", "content": []})
        assert '<div class="message-content"><p>plain <strong>text</strong></p></div>' in render_message(m, {})

    def test_empty_string_content_uses_text(self):
        m = Message.from_dict({"index": 0, "sender": "human", "content": "", "text": "hello world"})
        assert m.content == ()
        assert '<div class="message-content"><p>hello world</p></div>' in render_message(m, {})

    def test_empty_message(self):
        m = Message.from_dict({"index": 0, "sender": "human"})
        assert '<div class="message-content"></div>' in render_message(m)

    def test_idempotent(self, conversation_dict):
        conv = Conversation.from_dict(conversation_dict)
        lookup = {"img-1": "data:image/png;base64,AAAA"}
        for m in conv.messages:
            assert render_message(m, lookup) == render_message(m, lookup)

    def test_lookup_is_not_mutated(self, conversation_dict):
        conv = Conversation.from_dict(conversation_dict)
        lookup = {}
        render_messages(conv.messages, lookup)
        assert lookup == {}


class TestUploads:
    IMAGE = {"file_name": "cat.png", "file_kind": "image", "file_uuid": "img-1"}
    DOC = {"file_name": "report.pdf", "file_kind": "document", "file_uuid": "doc-1",
           "document_asset": {"page_count": 3}}

    def test_resolved_image(self):
        m = _message(0, "x", sender="human", files_v2=[self.IMAGE])
        out = render_message(m, {"img-1": "data:image/png;base64,AAAA"})
        assert '<div class="uploaded-files-grid">' in out
        assert '<img src="data:image/png;base64,AAAA" alt="cat.png" loading="lazy">' in out

    @pytest.mark.parametrize("lookup", [None, {}, {"img-1": None}])
    def test_unresolved_image_degrades_to_name(self, lookup):
        out = render_message(_message(0, "x", files_v2=[self.IMAGE]), lookup)
        assert "<img" not in out
        assert '<span class="uploaded-file-name">cat.png</span>' in out

    def test_document_pages_and_thumbnail(self):
        out = render_message(_message(0, "x", files_v2=[self.DOC]), {"doc-1": "data:image/webp;base64,BB"})
        assert "report.pdf (3 pages)" in out
        assert '<img class="doc-thumbnail" src="data:image/webp;base64,BB"' in out

    def test_single_page_document_without_thumbnail(self):
        doc = dict(self.DOC, document_asset={"page_count": 1})
        out = render_message(_message(0, "x", files_v2=[doc]), {})
        assert "report.pdf (1 page)" in out
        assert "doc-thumbnail" not in out

    def test_text_attachment_with_content(self):
        m = _message(0, "x", attachments=[{"file_name": "a.txt", "extracted_content": "<b>hi</b>", "file_size": 2048}])
        out = render_message(m, {})
        assert '<details class="text-attachment">' in out
        assert '<span class="att-size">(2.0 KB)</span>' in out
        assert "<pre>&lt;b&gt;hi&lt;/b&gt;</pre>" in out

    def test_text_attachment_without_content(self):
        out = render_message(_message(0, "x", attachments=[{"file_name": "a.txt"}]), {})
        assert '<div class="attachment">' in out
        assert "text-attachment" not in out


# ─── ordering and documents ────────────────────────────────────────────────


class TestDocument:
    def test_messages_sorted_by_index(self):
        messages = [_message(3, "third"), _message(1, "first"), _message(2, "second")]
        out = render_messages(messages)
        assert out.index("first") < out.index("second") < out.index("third")
        assert [m.index for m in messages] == [3, 1, 2]

    def test_render_html_shell(self, conversation_dict):
        out = render_html(Conversation.from_dict(conversation_dict))
        assert out.startswith("<!DOCTYPE html>")
        assert '<html lang="en" data-theme="light">' in out
        assert "<title>Cats &amp; Dogs</title>" in out
        assert "claude-sonnet-4" in out
        assert 'id="theme-toggle"' in out
        assert 'id="expand-all-btn"' in out
        body = out.split('<main class="conversation">', 1)[1]
        assert body.index('class="message message-human"') < body.index('class="message message-assistant"')

    def test_render_html_dark_theme(self, conversation_dict):
        out = render_html(Conversation.from_dict(conversation_dict), theme="dark")
        assert 'data-theme="dark"' in out

    def test_unknown_theme_falls_back(self, conversation_dict, caplog):
        out = render_html(Conversation.from_dict(conversation_dict), theme="neon")
        assert 'data-theme="light"' in out
        assert "Unknown theme" in caplog.text

    def test_untitled_conversation(self):
        assert "<title>Claude Conversation</title>" in render_html(Conversation())


class TestExport:
    def test_export_writes_file(self, conversation_file, tmp_path):
        target = export_conversation(conversation_file, tmp_path / "out" / "chat.html")
        assert target == tmp_path / "out" / "chat.html"
        text = target.read_text(encoding="utf-8")
        assert "Cats &amp; Dogs" in text
        assert "Tell me about cats" in text

    def test_export_embeds_assets(self, conversation_file, tmp_path):
        assets = tmp_path / "assets"
        assets.mkdir()
        (assets / "img-1.png").write_bytes(b"\x89PNG")
        target = export_conversation(conversation_file, tmp_path / "chat.html", assets_dir=assets)
        assert "data:image/png;base64,iVBORw==" in target.read_text(encoding="utf-8")

    def test_export_with_custom_fetcher(self, conversation_file, tmp_path):
        calls = []

        def fetch(uuid, path):
            calls.append((uuid, path))
            return "data:image/gif;base64,R0lG"

        target = export_conversation(conversation_file, tmp_path / "chat.html", fetch=fetch)
        assert calls == [("img-1", "/api/files/img-1/preview")]
        assert "data:image/gif;base64,R0lG" in target.read_text(encoding="utf-8")

    def test_default_output_path(self, tmp_path):
        conv = Conversation(name="My chat: part 2")
        assert default_output_path(conv, tmp_path) == tmp_path / "My-chat-part-2.html"


# ─── helpers ───────────────────────────────────────────────────────────────


class TestHelpers:
    @pytest.mark.parametrize("name,expected", [
        ("Hello, World! 2", "Hello-World-2"),
        ("  spaced   out  ", "-spaced-out-"),
        ("", "claude-chat"),
        ("???", "claude-chat"),
        ("a" * 100, "a" * 80),
    ])
    def test_sanitize_filename(self, name, expected):
        assert sanitize_filename(name) == expected

    @pytest.mark.parametrize("size,expected", [
        (0, "0 B"), (512, "512 B"), (1536, "1.5 KB"), (3 * 1024 * 1024, "3.0 MB"),
    ])
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected

    def test_parse_timestamp(self):
        ts = parse_timestamp("2025-03-01T10:15:00Z")
        assert ts is not None and ts.utcoffset().total_seconds() == 0
        assert parse_timestamp("") is None
        assert parse_timestamp("yesterday") is None
