"""
Zip packaging of generated backend files.
"""

from __future__ import annotations

import io
import logging
import zipfile
from typing import Iterable, List, Set

from awb.ir.workflow_schema import GeneratedFile

LOGGER = logging.getLogger(__name__)

# Fixed entry timestamp so identical inputs give identical archive bytes.
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
FILE_MODE = 0o644 << 16
DIR_MODE = (0o40755 << 16) | 0x10


class ArchiveBuildError(RuntimeError):
    """Raised when generated files cannot be packed."""


def parent_directories(path: str) -> List[str]:
    """Return ``a/``, ``a/b/`` ... for ``a/b/file``, outermost first."""

    parts = path.split("/")[:-1]
    return ["/".join(parts[: index + 1]) + "/" for index in range(len(parts))]


def _check_path(path: str) -> None:
    if not path or path.startswith("/") or path.endswith("/"):
        raise ArchiveBuildError(f"Invalid archive path: {path!r}")
    if any(part in ("", ".", "..") for part in path.split("/")):
        raise ArchiveBuildError(f"Invalid archive path: {path!r}")


class ArchiveBuilder:
    def __init__(self, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self.compression = compression

    def pack(self, files: Iterable[GeneratedFile]) -> bytes:
        buffer = io.BytesIO()
        created_dirs: Set[str] = set()
        written: Set[str] = set()
        try:
            with zipfile.ZipFile(buffer, "w", self.compression) as archive:
                for item in files:
                    _check_path(item.path)
                    if item.path in written:
                        raise ArchiveBuildError(f"Duplicate archive path: {item.path}")
                    for directory in parent_directories(item.path):
                        if directory in created_dirs:
                            continue
                        info = zipfile.ZipInfo(directory, date_time=ENTRY_DATE_TIME)
                        info.external_attr = DIR_MODE
                        archive.writestr(info, b"")
                        created_dirs.add(directory)

                    info = zipfile.ZipInfo(item.path, date_time=ENTRY_DATE_TIME)
                    info.compress_type = self.compression
                    info.external_attr = FILE_MODE
                    archive.writestr(info, item.content.encode("utf-8"))
                    written.add(item.path)
        except ArchiveBuildError:
            raise
        except (OSError, ValueError, zipfile.BadZipFile) as exc:
            raise ArchiveBuildError(f"Failed to build archive: {exc}") from exc

        LOGGER.debug(
            "Packed %d files and %d directories", len(written), len(created_dirs)
        )
        return buffer.getvalue()
