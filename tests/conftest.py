"""Shared fixtures for claude_chat_export tests."""

import json

import pytest

from claude_chat_export import logging_setup


SAMPLE_CONVERSATION = {
    "uuid": "conv-1",
    "name": "Cats & Dogs",
    "model": "claude-sonnet-4",
    "created_at": "2025-03-01T10:15:00Z",
    "chat_messages": [
        {
            "index": 1,
            "sender": "assistant",
            "content": [
                {"type": "thinking", "thinking": "They want **facts**."},
                {"type": "text", "text": "Cats sleep a lot."},
            ],
        },
        {
            "index": 0,
            "sender": "human",
            "text": "Tell me about cats",
            "content": [{"type": "text", "text": "Tell me about cats"}],
            "files_v2": [
                {
                    "file_name": "cat.png",
                    "file_kind": "image",
                    "file_uuid": "img-1",
                    "preview_url": "/api/files/img-1/preview",
                },
            ],
        },
    ],
}


@pytest.fixture
def conversation_dict():
    return json.loads(json.dumps(SAMPLE_CONVERSATION))


@pytest.fixture
def conversation_file(tmp_path, conversation_dict):
    path = tmp_path / "conv-1.json"
    path.write_text(json.dumps(conversation_dict), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_logging():
    logging_setup.reset()
    yield
    logging_setup.reset()
