import json
import unittest

from sitelinks.ingest import IngestStats, _format_elapsed, ingest


class RecordingWriter:
    """Stands in for a StoreWriter, recording puts in order."""

    def __init__(self):
        self.calls = []
        self.table = {}

    def put(self, key, entity_id):
        self.calls.append((key, entity_id))
        self.table[key] = entity_id


def _line(entity_id, **sitelinks):
    record = {"id": entity_id, "sitelinks": {site: {"site": site, "title": title} for site, title in sitelinks.items()}}
    return json.dumps(record, ensure_ascii=False)


class IngestTests(unittest.TestCase):
    def test_writes_one_key_per_sitelink(self) -> None:
        writer = RecordingWriter()
        lines = [_line("Q76", enwiki="Barack Obama", enwikiquote="Barack Obama", commonswiki="Barack Obama")]
        stats = ingest(lines, writer, progress=False)
        self.assertEqual(
            writer.table,
            {
                b"en:barack_obama": "Q76",
                b"en.wikiquote:barack_obama": "Q76",
                b"und.wikicommons:barack_obama": "Q76",
            },
        )
        self.assertEqual(stats.keys_written, 3)
        self.assertEqual(stats.entities, 1)

    def test_puts_follow_input_order(self) -> None:
        writer = RecordingWriter()
        lines = [_line("Q1", enwiki="Mercury"), _line("Q2", enwiki="MERCURY")]
        ingest(lines, writer, progress=False)
        self.assertEqual(writer.calls, [(b"en:mercury", "Q1"), (b"en:mercury", "Q2")])
        self.assertEqual(writer.table[b"en:mercury"], "Q2")

    def test_skips_bad_records_and_sitelinks(self) -> None:
        writer = RecordingWriter()
        lines = [
            "{not json",
            _line("Q1"),
            _line("Q2", enwiki="Two", foo="dropped"),
            _line("Q3", dewiki="Drei"),
        ]
        stats = ingest(lines, writer, progress=False)
        self.assertEqual([call[1] for call in writer.calls], ["Q2", "Q3"])
        self.assertEqual(stats.records, 4)
        self.assertEqual(stats.entities, 2)
        self.assertEqual(stats.skipped_records, 2)
        self.assertEqual(stats.sitelinks_dropped, 1)
        self.assertEqual(stats.keys_written, 2)

    def test_max_records_caps_reading(self) -> None:
        lines = [_line(f"Q{idx}", enwiki=f"Page {idx}") for idx in range(1, 11)]
        writer = RecordingWriter()
        stats = ingest(iter(lines), writer, max_records=3, progress=False)
        self.assertEqual(stats.records, 3)
        self.assertEqual([call[1] for call in writer.calls], ["Q1", "Q2", "Q3"])

    def test_unbounded_by_default(self) -> None:
        lines = [_line(f"Q{idx}", enwiki=f"Page {idx}") for idx in range(1, 11)]
        stats = ingest(lines, RecordingWriter(), progress=False)
        self.assertEqual(stats.records, 10)

    def test_progress_logging_does_not_change_output(self) -> None:
        lines = [_line(f"Q{idx}", enwiki=f"Page {idx}") for idx in range(1, 6)]
        quiet, noisy = RecordingWriter(), RecordingWriter()
        ingest(lines, quiet, progress=False)
        with self.assertLogs("sitelinks.ingest", level="INFO") as logs:
            ingest(lines, noisy, log_every=2, progress=True)
        self.assertEqual(quiet.calls, noisy.calls)
        heartbeats = [msg for msg in logs.output if "Processed" in msg]
        # Records 1, 3 and 5.
        self.assertEqual(len(heartbeats), 3)

    def test_disabled_progress_logs_no_heartbeat(self) -> None:
        lines = [_line(f"Q{idx}", enwiki=f"Page {idx}") for idx in range(1, 6)]
        with self.assertLogs("sitelinks.ingest", level="INFO") as logs:
            ingest(lines, RecordingWriter(), log_every=2, progress=False)
        self.assertFalse([msg for msg in logs.output if "Processed" in msg])

    def test_log_every_one_logs_each_record(self) -> None:
        lines = [_line(f"Q{idx}", enwiki=f"Page {idx}") for idx in range(1, 6)]
        with self.assertLogs("sitelinks.ingest", level="INFO") as logs:
            ingest(lines, RecordingWriter(), log_every=1, progress=True)
        self.assertEqual(len([msg for msg in logs.output if "Processed" in msg]), 5)

    def test_stats_defaults(self) -> None:
        stats = IngestStats()
        self.assertEqual(stats.skipped_records, 0)

    def test_format_elapsed(self) -> None:
        self.assertEqual(_format_elapsed(3725.9), "01:02:05")
        self.assertEqual(_format_elapsed(-4), "00:00:00")


if __name__ == "__main__":
    unittest.main()
