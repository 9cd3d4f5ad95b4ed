"""Tests for parsing conversation exports into model objects."""

import json
import os

import pytest

from claude_chat_export.models import (
    CodeExecutionResultBlock,
    Conversation,
    ConversationLoadError,
    KnowledgeBlock,
    Message,
    TextAttachment,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownBlock,
    UploadedFile,
    WebSearchToolResultBlock,
    list_conversation_files,
    load_conversation,
    parse_content_block,
)


# ─── content blocks ────────────────────────────────────────────────────────


class TestParseContentBlock:
    def test_known_tags(self):
        assert parse_content_block({"type": "text", "text": "hi"}) == TextBlock(text="hi")
        assert parse_content_block({"type": "thinking", "thinking": "t"}) == ThinkingBlock(thinking="t")

    def test_thinking_falls_back_to_text(self):
        assert parse_content_block({"type": "thinking", "text": "t"}) == ThinkingBlock(thinking="t")

    def test_unknown_tag_keeps_name(self):
        block = parse_content_block({"type": "citation_marker", "x": 1})
        assert block == UnknownBlock(type_name="citation_marker", raw={"type": "citation_marker", "x": 1})

    @pytest.mark.parametrize("raw,name", [(None, "NoneType"), ("s", "str"), ([], "list"), ({}, "unknown")])
    def test_non_blocks(self, raw, name):
        block = parse_content_block(raw)
        assert isinstance(block, UnknownBlock)
        assert block.type_name == name

    def test_server_tool_use(self):
        block = parse_content_block({"type": "server_tool_use", "name": "web_search", "input": {"query": "q"}})
        assert isinstance(block, ToolUseBlock)
        assert block.server is True
        assert block.input == {"query": "q"}

    def test_tool_use_with_bad_input(self):
        block = parse_content_block({"type": "tool_use", "name": 5, "input": "nope"})
        assert block == ToolUseBlock(name="5", input={})

    def test_tool_result_nested_content(self):
        block = parse_content_block({"type": "tool_result", "content": [
            {"type": "text", "text": "a"}, {"type": "knowledge", "name": "K"},
        ], "is_error": 1})
        assert isinstance(block, ToolResultBlock)
        assert block.is_error is True
        assert block.content == (TextBlock(text="a"), KnowledgeBlock(title="K"))

    def test_tool_result_string_content(self):
        assert parse_content_block({"type": "tool_result", "content": "x"}).content == "x"

    def test_knowledge_metadata(self):
        block = parse_content_block({"type": "knowledge", "url": "https://a.com", "metadata": {
            "site_name": "A", "site_domain": "a.com", "favicon_url": "https://a.com/f.ico",
        }})
        assert block == KnowledgeBlock(
            title="Source", url="https://a.com", site_name="A", site_domain="a.com",
            favicon_url="https://a.com/f.ico",
        )

    def test_web_search_results_skip_other_items(self):
        block = parse_content_block({"type": "web_search_tool_result", "content": [
            {"type": "web_search_result", "title": "T", "url": "u"}, {"type": "other"}, "junk",
        ]})
        assert isinstance(block, WebSearchToolResultBlock)
        assert [r.title for r in block.results] == ["T"]
        assert block.is_error is False

    def test_web_search_unknown_content(self):
        block = parse_content_block({"type": "web_search_tool_result", "content": {"type": "other"}})
        assert block == WebSearchToolResultBlock()

    def test_code_execution_reads_top_level_first(self):
        block = parse_content_block({"type": "code_execution_tool_result", "output": "o",
                                     "content": {"stdout": "ignored"}})
        assert block == CodeExecutionResultBlock(output="o")


# ─── messages ──────────────────────────────────────────────────────────────


class TestMessage:
    def test_defaults(self):
        m = Message.from_dict({})
        assert m == Message(index=0, sender="unknown")

    def test_files_v2_preferred(self):
        m = Message.from_dict({
            "files_v2": [{"file_name": "new.png", "file_kind": "image", "file_uuid": "u2"}],
            "files": [{"file_name": "old.png"}],
        })
        assert [f.name for f in m.files] == ["new.png"]

    def test_files_fallback(self):
        m = Message.from_dict({"files": [{"file_name": "old.png"}, "junk"]})
        assert [f.name for f in m.files] == ["old.png"]

    def test_string_content_becomes_text_block(self):
        assert Message.from_dict({"content": "hey"}).content == (TextBlock(text="hey"),)

    def test_string_index(self):
        assert Message.from_dict({"index": "4"}).index == 4

    def test_uploaded_file_assets(self):
        f = UploadedFile.from_dict({
            "file_name": "doc.pdf", "file_kind": "document", "file_uuid": "d1",
            "document_asset": {"page_count": 12},
            "thumbnail_asset": {"url": "/api/d1/thumbnail"},
        })
        assert f.page_count == 12
        assert f.thumbnail_url == "/api/d1/thumbnail"
        assert f.preview_url == ""

    def test_text_attachment(self):
        a = TextAttachment.from_dict({"filename": "notes.txt", "extracted_content": "x", "file_size": 1200})
        assert a == TextAttachment(name="notes.txt", extracted_text="x", size_bytes=1200)


class TestConversation:
    def test_from_dict(self, conversation_dict):
        conv = Conversation.from_dict(conversation_dict)
        assert conv.name == "Cats & Dogs"
        assert [m.index for m in conv.messages] == [1, 0]

    def test_missing_messages(self):
        assert Conversation.from_dict({"chat_messages": "nope"}).messages == ()


# ─── loading ───────────────────────────────────────────────────────────────


class TestLoadConversation:
    def test_load(self, conversation_file):
        conv = load_conversation(conversation_file)
        assert conv.uuid == "conv-1"
        assert len(conv.messages) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConversationLoadError, match="Cannot read"):
            load_conversation(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConversationLoadError, match="not valid JSON"):
            load_conversation(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([1, 2]), encoding="utf-8")
        with pytest.raises(ConversationLoadError, match="does not contain a conversation"):
            load_conversation(path)

    def test_list_conversation_files_sorted_by_mtime(self, tmp_path):
        older = tmp_path / "b.json"
        newer = tmp_path / "a.json"
        older.write_text("{}")
        newer.write_text("{}")
        (tmp_path / "skip.txt").write_text("")
        os.utime(older, (1000, 1000))
        os.utime(newer, (2000, 2000))
        assert list_conversation_files(tmp_path) == [older, newer]
