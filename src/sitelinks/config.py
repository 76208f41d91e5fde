import os
import re
from pathlib import Path

# HTTP identity for the artifact upload
HEADERS = {"User-Agent": "WikidataSitelinks/1.0 (sitelinks lookup table builder)"}
UPLOAD_TIMEOUT = 600  # Seconds per upload request
UPLOAD_URL = os.environ.get("SITELINKS_UPLOAD_URL") or None

# Dump discovery and versioning
DUMPS_DIR = Path("../public/dumps/public/wikidatawiki/entities")
LATEST_DUMP_NAME = "latest-all.json.bz2"
DUMP_VERSION_PATTERN = re.compile(r"wikidata-(\d{8})-all\.json\.bz2")
PUBLISHED_VERSION_FILE = Path("published_version")

# Dump line framing
MIN_RECORD_LENGTH = 5  # Shorter lines cannot hold an entity ("[", "]", blanks)
RECORD_SEPARATOR = ","

# Ingestion limits and progress reporting
MAX_RECORDS = None  # None means the whole dump
PROGRESS_LOG_EVERY = 100_000  # Records between heartbeat log lines
DUMP_SCAN_TOTAL_ENTITIES = None  # Optional tqdm total hint

# LMDB store layout
OUTPUT_DIR = Path(".")
STORE_MAP_SIZE = 8 * 1024 * 1024 * 1024  # 8 GiB ceiling
STORE_TABLE = None  # None selects the environment's main table
STORE_NAME_TEMPLATE = "sitelinks-{version}.mdb"
LOCK_SUFFIX = "-lock"

# Artifact compression
ZSTD_LEVEL = 11
ARTIFACT_SUFFIX = ".zst"
