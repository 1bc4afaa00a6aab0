"""
In-memory registry of packed archives awaiting download.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from pydantic import BaseModel, Field

LOGGER = logging.getLogger(__name__)

HANDLE_PREFIX = "/api/archives/"
DEFAULT_FILENAME = "ai-workflow-backend.zip"


class StoredArchive(BaseModel):
    archive_id: str
    filename: str
    content: bytes
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def handle(self) -> str:
        return f"{HANDLE_PREFIX}{self.archive_id}"

    @property
    def size(self) -> int:
        return len(self.content)


def archive_id_from_handle(handle: str) -> str:
    if handle.startswith(HANDLE_PREFIX):
        return handle[len(HANDLE_PREFIX):]
    return handle


class ArchiveStore:
    """
    Holds archive bytes behind URL-like handles until they are released.

    The store keeps at most ``max_archives`` entries; registering past
    that drops the oldest one.
    """

    def __init__(self, max_archives: int = 32, filename: str = DEFAULT_FILENAME) -> None:
        if max_archives < 1:
            raise ValueError("max_archives must be >= 1")
        self.max_archives = max_archives
        self.filename = filename
        self._archives: "OrderedDict[str, StoredArchive]" = OrderedDict()
        self._lock = threading.Lock()

    def register(self, content: bytes, filename: Optional[str] = None) -> StoredArchive:
        archive = StoredArchive(
            archive_id=uuid.uuid4().hex,
            filename=filename or self.filename,
            content=content,
        )
        with self._lock:
            self._archives[archive.archive_id] = archive
            while len(self._archives) > self.max_archives:
                evicted_id, _ = self._archives.popitem(last=False)
                LOGGER.info("Archive store full, released oldest archive %s", evicted_id)
        return archive

    def get(self, handle: str) -> Optional[StoredArchive]:
        with self._lock:
            return self._archives.get(archive_id_from_handle(handle))

    def release(self, handle: str) -> bool:
        with self._lock:
            return self._archives.pop(archive_id_from_handle(handle), None) is not None

    @contextmanager
    def scoped(self, content: bytes, filename: Optional[str] = None) -> Iterator[StoredArchive]:
        archive = self.register(content, filename=filename)
        try:
            yield archive
        finally:
            self.release(archive.archive_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._archives)
