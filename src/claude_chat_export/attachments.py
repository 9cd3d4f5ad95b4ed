"""Resolve uploaded files into embeddable data URIs before rendering.

The export only carries asset paths (`/api/.../preview`), not bytes. A fetcher
turns one asset into a `data:` URI; `resolve_attachments` runs it over every
upload in bounded concurrent batches and returns the uuid -> data URI lookup
consumed by `render_message`.
"""

import base64
import logging
import mimetypes
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .models import Conversation

logger = logging.getLogger(__name__)

# (file_uuid, asset_path) -> data URI, or None when unavailable
Fetcher = Callable[[str, str], "str | None"]

DEFAULT_BATCH_SIZE = 5


@dataclass(frozen=True)
class AttachmentRequest:
    """One upload to resolve."""
    uuid: str
    asset_path: str


def collect_attachment_requests(conversation: Conversation) -> list[AttachmentRequest]:
    """List uploads worth embedding, once per uuid, in message order.

    Images use their preview (falling back to the thumbnail); documents
    only have a thumbnail.
    """
    requests: list[AttachmentRequest] = []
    seen: set[str] = set()
    for message in conversation.messages:
        for file in message.files:
            if not file.uuid or file.uuid in seen:
                continue
            if file.kind == "image":
                path = file.preview_url or file.thumbnail_url
            elif file.kind == "document":
                path = file.thumbnail_url
            else:
                path = ""
            if path:
                seen.add(file.uuid)
                requests.append(AttachmentRequest(uuid=file.uuid, asset_path=path))
    return requests


def _fetch_one(fetch: Fetcher, request: AttachmentRequest) -> str | None:
    try:
        data_uri = fetch(request.uuid, request.asset_path)
    except Exception as e:
        logger.warning("Could not fetch attachment %s (%s): %s", request.uuid, request.asset_path, e)
        return None
    if data_uri is None:
        logger.warning("Attachment %s not found (%s)", request.uuid, request.asset_path)
    return data_uri


def resolve_attachments(
    conversation: Conversation,
    fetch: Fetcher,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> dict[str, str | None]:
    """Fetch every upload in batches of `batch_size` concurrent requests.

    Returns uuid -> data URI; unresolved uploads map to None.
    """
    requests = collect_attachment_requests(conversation)
    lookup: dict[str, str | None] = {}
    if not requests:
        return lookup

    batch_size = max(1, batch_size)
    with ThreadPoolExecutor(max_workers=batch_size) as pool:
        for start in range(0, len(requests), batch_size):
            batch = requests[start:start + batch_size]
            results = pool.map(lambda r: _fetch_one(fetch, r), batch)
            for request, data_uri in zip(batch, results):
                lookup[request.uuid] = data_uri

    resolved = sum(1 for v in lookup.values() if v)
    logger.info("Resolved %d of %d attachments", resolved, len(lookup))
    return lookup


def to_data_uri(data: bytes, media_type: str) -> str:
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


class DirectoryFetcher:
    """Fetch assets from a local directory of downloaded files.

    An asset is found by the last segment of its path, then by any file
    named after the upload's uuid (`<uuid>.png`, `<uuid>.webp`, ...).
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def find(self, uuid: str, asset_path: str) -> Path | None:
        name = PurePosixPath(asset_path.split("?", 1)[0]).name
        if name:
            candidate = self.root / name
            if candidate.is_file():
                return candidate
        if uuid:
            for candidate in sorted(self.root.glob(f"{uuid}.*")):
                if candidate.is_file():
                    return candidate
        return None

    def __call__(self, uuid: str, asset_path: str) -> str | None:
        path = self.find(uuid, asset_path)
        if path is None:
            return None
        media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return to_data_uri(path.read_bytes(), media_type)
