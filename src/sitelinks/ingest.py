import itertools
import logging
import sys
import time
from dataclasses import dataclass

from tqdm import tqdm

from . import config
from .keys import make_key
from .records import iter_entities, split_site_key

logger = logging.getLogger(__name__)


def _format_elapsed(seconds):
    """Render a duration in seconds as H:MM:SS for the heartbeat log."""
    minutes, secs = divmod(int(max(seconds, 0)), 60)
    hours, minutes = divmod(minutes, 60)
    return "%02d:%02d:%02d" % (hours, minutes, secs)


@dataclass
class IngestStats:
    records: int = 0
    entities: int = 0
    keys_written: int = 0
    sitelinks_dropped: int = 0
    elapsed_seconds: float = 0.0

    @property
    def skipped_records(self):
        return self.records - self.entities


class _RecordCounter:
    """Counts records as they are pulled and emits the heartbeat log."""

    def __init__(self, lines, stats, log_every, start):
        self._lines = lines
        self._stats = stats
        self._log_every = log_every
        self._start = start

    def __iter__(self):
        for line in self._lines:
            self._stats.records += 1
            if self._log_every and (self._stats.records - 1) % self._log_every == 0:
                elapsed = time.monotonic() - self._start
                rate = self._stats.records / elapsed if elapsed > 0 else 0.0
                logger.info(
                    "[*] Processed %s entities in %s (%.2f entities/s), %s keys written.",
                    f"{self._stats.records:,}",
                    _format_elapsed(elapsed),
                    rate,
                    f"{self._stats.keys_written:,}",
                )
            yield line


def ingest(
    lines,
    writer,
    *,
    max_records=config.MAX_RECORDS,
    log_every=config.PROGRESS_LOG_EVERY,
    progress=True,
):
    """Write one key per sitelink of every entity in lines, in input order.

    max_records caps the number of records read (None reads everything).
    log_every=0 and progress=False silence the heartbeat and progress bar;
    neither affects what is written.
    """
    stats = IngestStats()
    start = time.monotonic()
    if max_records is not None:
        lines = itertools.islice(lines, max_records)
    lines = tqdm(
        lines,
        desc="Ingesting sitelinks",
        unit=" entity",
        miniters=10000,
        total=config.DUMP_SCAN_TOTAL_ENTITIES,
        disable=not progress or not sys.stderr.isatty(),
    )
    counted = _RecordCounter(lines, stats, log_every if progress else 0, start)
    for entity in iter_entities(counted):
        stats.entities += 1
        for site_key, sitelink in entity.sitelinks.items():
            parts = split_site_key(site_key)
            if parts is None:
                stats.sitelinks_dropped += 1
                continue
            writer.put(make_key(parts.lang, parts.site, sitelink.title), entity.id)
            stats.keys_written += 1
    stats.elapsed_seconds = time.monotonic() - start
    logger.info(
        "[+] Ingested %s entities from %s records (%s skipped), %s keys written, %s sitelinks dropped in %s.",
        f"{stats.entities:,}",
        f"{stats.records:,}",
        f"{stats.skipped_records:,}",
        f"{stats.keys_written:,}",
        f"{stats.sitelinks_dropped:,}",
        _format_elapsed(stats.elapsed_seconds),
    )
    return stats
