import logging
from pathlib import Path

from . import config
from .archive import archive_store
from .dump import iter_dump_lines
from .ingest import ingest
from .publish import PublishState, dump_version, find_latest_dump, upload_artifact
from .store import SitelinkStore, lock_path_for, remove_store_files

logger = logging.getLogger(__name__)


def artifact_paths(version, out_dir=config.OUTPUT_DIR):
    """Return (store, lock, compressed artifact) paths for a dump version."""
    db_path = Path(out_dir) / config.STORE_NAME_TEMPLATE.format(version=version)
    zst_path = db_path.with_name(db_path.name + config.ARTIFACT_SUFFIX)
    return db_path, lock_path_for(db_path), zst_path


def build_store(
    dump_path,
    db_path,
    *,
    map_size=config.STORE_MAP_SIZE,
    max_records=config.MAX_RECORDS,
    log_every=config.PROGRESS_LOG_EVERY,
    progress=True,
):
    """Load the dump into a fresh store in one transaction.

    Any failure removes the partially written store before re-raising.
    """
    remove_store_files(db_path)
    try:
        with SitelinkStore(db_path, map_size=map_size) as store:
            with store.writer() as writer:
                stats = ingest(
                    iter_dump_lines(dump_path),
                    writer,
                    max_records=max_records,
                    log_every=log_every,
                    progress=progress,
                )
    except BaseException:
        remove_store_files(db_path)
        raise
    return stats


def build_artifact(
    dump_path,
    version,
    out_dir=config.OUTPUT_DIR,
    *,
    map_size=config.STORE_MAP_SIZE,
    max_records=config.MAX_RECORDS,
    log_every=config.PROGRESS_LOG_EVERY,
    progress=True,
):
    """Build and compress the store for one dump, reusing a finished artifact."""
    db_path, _, zst_path = artifact_paths(version, out_dir)
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    remove_store_files(db_path)
    if zst_path.exists():
        logger.info("[*] Reusing existing artifact %s", zst_path)
        return zst_path
    logger.info("[*] Building sitelinks-%s from %s", version, dump_path)
    build_store(
        dump_path,
        db_path,
        map_size=map_size,
        max_records=max_records,
        log_every=log_every,
        progress=progress,
    )
    return archive_store(db_path, zst_path)


def run(
    dumps_dir=config.DUMPS_DIR,
    out_dir=config.OUTPUT_DIR,
    state_path=config.PUBLISHED_VERSION_FILE,
    upload_url=config.UPLOAD_URL,
    *,
    dump_path=None,
    version=None,
    force=False,
    map_size=config.STORE_MAP_SIZE,
    max_records=config.MAX_RECORDS,
    log_every=config.PROGRESS_LOG_EVERY,
    progress=True,
):
    """Build, upload and record the sitelinks artifact for the latest dump.

    Returns the artifact path, or None when that version is already published.
    """
    if dump_path is None:
        dump_path = find_latest_dump(dumps_dir)
    if version is None:
        version = dump_version(dump_path)
    state = PublishState(state_path)
    if not force and state.is_published(version):
        logger.info("[*] Already published sitelinks-%s, nothing to do.", version)
        return None
    zst_path = build_artifact(
        dump_path,
        version,
        out_dir,
        map_size=map_size,
        max_records=max_records,
        log_every=log_every,
        progress=progress,
    )
    upload_artifact(zst_path, url=upload_url)
    state.mark_published(version)
    logger.info("[+] Published sitelinks-%s.", version)
    return zst_path
