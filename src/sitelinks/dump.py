import bz2
import gzip
import io
import logging
from pathlib import Path

import zstandard as zstd

from . import config
from .errors import DUMP_READ_FAILED, BuildError

logger = logging.getLogger(__name__)


def open_dump(path):
    """Open a dump for text reading, picking the decompressor from the suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".bz2":
        # BZ2File reads multi-stream archives such as the Wikimedia dumps.
        return bz2.open(path, "rt", encoding="utf-8")
    if suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8")
    if suffix == ".zst":
        raw = open(path, "rb")
        reader = zstd.ZstdDecompressor().stream_reader(raw, read_across_frames=True, closefd=True)
        return io.TextIOWrapper(reader, encoding="utf-8")
    return open(path, "r", encoding="utf-8")


def clean_line(line, min_length=config.MIN_RECORD_LENGTH, separator=config.RECORD_SEPARATOR):
    """Return the record text of a raw dump line, or None if it is too short to hold one."""
    line = line.rstrip("\r\n")
    if len(line) < min_length:
        return None
    if line.endswith(separator):
        line = line[: -len(separator)]
    return line


def iter_dump_lines(path, min_length=config.MIN_RECORD_LENGTH):
    """Yield record lines from a compressed JSON-array dump, one entity per line."""
    path = Path(path)
    logger.info("[*] Reading dump %s", path)
    try:
        with open_dump(path) as fh:
            for raw in fh:
                line = clean_line(raw, min_length=min_length)
                if line is not None:
                    yield line
    except (OSError, EOFError, UnicodeDecodeError, zstd.ZstdError) as exc:
        raise BuildError(
            DUMP_READ_FAILED,
            f"Cannot read dump {path}.",
            {"path": str(path), "error": str(exc)},
        ) from exc
