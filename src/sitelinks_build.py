import argparse
import logging
from pathlib import Path

from sitelinks.build import run
from sitelinks.config import (
    DUMPS_DIR,
    OUTPUT_DIR,
    PUBLISHED_VERSION_FILE,
    STORE_MAP_SIZE,
    UPLOAD_URL,
)
from sitelinks.errors import BuildError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _non_negative_int(value):
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Build the Wikimedia page title -> Wikidata id lookup table.")
    parser.add_argument(
        "--dumps-dir",
        type=Path,
        default=DUMPS_DIR,
        help="Wikidata entities dump directory holding latest-all.json.bz2.",
    )
    parser.add_argument(
        "--dump",
        type=Path,
        default=None,
        help="Explicit dump file; bypasses discovery in --dumps-dir.",
    )
    parser.add_argument(
        "--version",
        default=None,
        help="Version label for the artifact (default: date in the dump file name).",
    )
    parser.add_argument("--out-dir", type=Path, default=OUTPUT_DIR, help="Directory for the store and artifact.")
    parser.add_argument(
        "--state-file",
        type=Path,
        default=PUBLISHED_VERSION_FILE,
        help="File recording the last published version.",
    )
    parser.add_argument(
        "--upload-url",
        default=UPLOAD_URL,
        help="Base URL to PUT the artifact to (default: $SITELINKS_UPLOAD_URL, or no upload).",
    )
    parser.add_argument(
        "--max-records",
        type=_non_negative_int,
        default=None,
        help="Stop after this many dump records (debugging helper).",
    )
    parser.add_argument("--map-size", type=int, default=STORE_MAP_SIZE, help="LMDB map size ceiling in bytes.")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar and heartbeat log.")
    parser.add_argument("--force", action="store_true", help="Rebuild even if the version is already published.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    try:
        run(
            dumps_dir=args.dumps_dir,
            out_dir=args.out_dir,
            state_path=args.state_file,
            upload_url=args.upload_url,
            dump_path=args.dump,
            version=args.version,
            force=args.force,
            map_size=args.map_size,
            max_records=args.max_records,
            progress=not args.no_progress,
        )
    except BuildError as exc:
        logger.error("[!] Build failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
