from __future__ import annotations

from typing import Any, Optional

DUMP_NOT_FOUND = "DUMP_NOT_FOUND"
DUMP_VERSION_UNKNOWN = "DUMP_VERSION_UNKNOWN"
DUMP_READ_FAILED = "DUMP_READ_FAILED"
STORE_OPEN_FAILED = "STORE_OPEN_FAILED"
STORE_WRITE_FAILED = "STORE_WRITE_FAILED"
COMPRESSION_FAILED = "COMPRESSION_FAILED"
UPLOAD_FAILED = "UPLOAD_FAILED"


class BuildError(Exception):
    """Fatal build failure. Aborts the run without a usable artifact.

    `code` is one of the constants above; `details` carries the paths and
    underlying error text.
    """

    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.code, self.message = code, message
        self.details = dict(details) if details else {}
        super().__init__(f"{code}: {message}")
