import logging
from pathlib import Path

import requests

from . import config
from .errors import DUMP_NOT_FOUND, DUMP_VERSION_UNKNOWN, UPLOAD_FAILED, BuildError

logger = logging.getLogger(__name__)


def find_latest_dump(dumps_dir=config.DUMPS_DIR, latest_name=config.LATEST_DUMP_NAME):
    """Resolve the latest-all link of the entities dump directory to the dated dump file."""
    link = Path(dumps_dir) / latest_name
    try:
        path = link.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise BuildError(
            DUMP_NOT_FOUND,
            f"No dump found at {link}.",
            {"path": str(link), "error": str(exc)},
        ) from exc
    return path


def dump_version(dump_path, pattern=config.DUMP_VERSION_PATTERN):
    """Return the YYYYMMDD date of a dump file name such as wikidata-20240101-all.json.bz2."""
    name = Path(dump_path).name
    match = pattern.search(name)
    if not match:
        raise BuildError(DUMP_VERSION_UNKNOWN, f"Cannot tell dump version from {name}.", {"name": name})
    return match.group(1)


class PublishState:
    """One-line file recording the last published dump version."""

    def __init__(self, path=config.PUBLISHED_VERSION_FILE):
        self.path = Path(path)

    def published_version(self):
        try:
            return self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return ""

    def is_published(self, version):
        return self.published_version() == version

    def mark_published(self, version):
        self.path.write_text(f"{version}\n", encoding="utf-8")


def upload_artifact(path, url=config.UPLOAD_URL, timeout=config.UPLOAD_TIMEOUT):
    """PUT the artifact to url. Without a url there is nothing to upload."""
    path = Path(path)
    if not url:
        logger.info("[*] No upload target configured; keeping %s locally.", path)
        return True
    target = url.rstrip("/") + "/" + path.name
    logger.info("[*] Uploading %s to %s", path.name, target)
    try:
        with open(path, "rb") as fh:
            response = requests.put(
                target,
                data=fh,
                headers={**config.HEADERS, "Content-Type": "application/zstd"},
                timeout=timeout,
            )
        response.raise_for_status()
    except (OSError, requests.RequestException) as exc:
        raise BuildError(
            UPLOAD_FAILED,
            f"Upload of {path.name} failed.",
            {"path": str(path), "url": target, "error": str(exc)},
        ) from exc
    logger.info("[+] Uploaded %s (HTTP %s).", path.name, response.status_code)
    return True
