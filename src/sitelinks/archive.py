import logging
import os
import time
from pathlib import Path

import zstandard as zstd

from . import config
from .errors import COMPRESSION_FAILED, BuildError
from .store import remove_store_files

logger = logging.getLogger(__name__)


def compress_store(db_path, out_path, level=config.ZSTD_LEVEL):
    """Compress a committed store file into out_path.

    The stream is written to a temporary sibling and renamed into place, so
    out_path only ever names a complete artifact.
    """
    db_path = Path(db_path)
    out_path = Path(out_path)
    tmp_path = out_path.with_name(out_path.name + ".tmp")
    start = time.monotonic()
    try:
        with open(db_path, "rb") as src, open(tmp_path, "wb") as dst:
            read, written = zstd.ZstdCompressor(level=level).copy_stream(src, dst)
        os.replace(tmp_path, out_path)
    except (OSError, zstd.ZstdError) as exc:
        tmp_path.unlink(missing_ok=True)
        raise BuildError(
            COMPRESSION_FAILED,
            f"Cannot compress {db_path} to {out_path}.",
            {"path": str(db_path), "out_path": str(out_path), "error": str(exc)},
        ) from exc
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.info(
        "[+] Compressed %s (%s bytes) to %s (%s bytes) in %.1fs",
        db_path.name,
        f"{read:,}",
        out_path.name,
        f"{written:,}",
        time.monotonic() - start,
    )
    return out_path


def archive_store(db_path, out_path, level=config.ZSTD_LEVEL):
    """Compress the store, then drop the uncompressed file and its lock file."""
    compress_store(db_path, out_path, level=level)
    remove_store_files(db_path)
    return Path(out_path)
