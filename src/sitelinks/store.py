import logging
from contextlib import contextmanager
from pathlib import Path

import lmdb

from . import config
from .errors import STORE_OPEN_FAILED, STORE_WRITE_FAILED, BuildError

logger = logging.getLogger(__name__)


def lock_path_for(db_path):
    db_path = Path(db_path)
    return db_path.with_name(db_path.name + config.LOCK_SUFFIX)


def remove_store_files(db_path):
    """Delete an LMDB store file and its lock file if present."""
    for path in (Path(db_path), lock_path_for(db_path)):
        path.unlink(missing_ok=True)


class StoreWriter:
    """Handle on the single write transaction of a build."""

    def __init__(self, txn, db):
        self._txn = txn
        self._db = db
        self.puts = 0

    def put(self, key, entity_id):
        """Upsert key -> entity id; a later put on the same key wins."""
        self._txn.put(key, entity_id.encode("utf-8"), db=self._db, overwrite=True)
        self.puts += 1


class SitelinkStore:
    """Single-file LMDB environment holding the sitelinks table."""

    def __init__(self, db_path, map_size=config.STORE_MAP_SIZE, table=config.STORE_TABLE):
        self.db_path = Path(db_path)
        self.map_size = map_size
        self.table = table
        self._env = None
        self._db = None

    def open(self, readonly=False):
        if self._env is not None:
            return self
        try:
            self._env = lmdb.open(
                str(self.db_path),
                map_size=self.map_size,
                subdir=False,
                max_dbs=1,
                readonly=readonly,
            )
            self._db = self._env.open_db(self.table, create=not readonly)
        except lmdb.Error as exc:
            self.close()
            raise BuildError(
                STORE_OPEN_FAILED,
                f"Cannot open LMDB environment at {self.db_path}.",
                {"path": str(self.db_path), "error": str(exc)},
            ) from exc
        return self

    def close(self):
        if self._env is not None:
            self._env.close()
        self._env = None
        self._db = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @contextmanager
    def writer(self):
        """Yield a StoreWriter over one write transaction.

        The transaction commits when the block exits normally and is aborted
        on any exception, so nothing is persisted from an incomplete pass.
        """
        self.open()
        try:
            txn = self._env.begin(write=True)
        except lmdb.Error as exc:
            raise BuildError(
                STORE_OPEN_FAILED,
                "Cannot begin write transaction.",
                {"path": str(self.db_path), "error": str(exc)},
            ) from exc
        writer = StoreWriter(txn, self._db)
        try:
            yield writer
        except lmdb.Error as exc:
            txn.abort()
            raise BuildError(
                STORE_WRITE_FAILED,
                f"Write to {self.db_path} failed after {writer.puts} puts.",
                {"path": str(self.db_path), "error": str(exc)},
            ) from exc
        except BaseException:
            txn.abort()
            logger.warning("[!] Write transaction aborted after %s puts.", writer.puts)
            raise
        try:
            txn.commit()
        except lmdb.Error as exc:
            raise BuildError(
                STORE_WRITE_FAILED,
                f"Commit to {self.db_path} failed.",
                {"path": str(self.db_path), "error": str(exc)},
            ) from exc
        logger.info("[+] Committed %s puts to %s", writer.puts, self.db_path)

    def lookup(self, key):
        """Return the entity id stored under key, or None."""
        self.open()
        with self._env.begin(db=self._db) as txn:
            value = txn.get(key)
        return value.decode("utf-8") if value is not None else None

    def count(self):
        self.open()
        with self._env.begin(db=self._db) as txn:
            return txn.stat(self._db)["entries"]
