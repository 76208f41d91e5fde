"""Entity records from dump lines and the site-keys of their sitelinks."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)

SITE_KEY_MARKER = "wiki"
UNDETERMINED_LANG = "und"
# Multilingual projects whose site-key carries no language ("commonswiki").
LANGUAGELESS_SITES = frozenset({"commons", "species"})


@dataclass(frozen=True)
class Sitelink:
    title: str


@dataclass(frozen=True)
class Entity:
    id: str
    sitelinks: dict[str, Sitelink]


@dataclass(frozen=True)
class SiteKey:
    lang: str
    site: str


def _is_text(value: object) -> bool:
    if not isinstance(value, str):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates from \ud800-style escapes.
        return False
    return True


def _parse_sitelinks(raw: object) -> Optional[dict[str, Sitelink]]:
    if not isinstance(raw, dict):
        return None
    sitelinks: dict[str, Sitelink] = {}
    for site_key, payload in raw.items():
        if not isinstance(payload, dict):
            return None
        title = payload.get("title")
        if not _is_text(site_key) or not _is_text(title):
            return None
        sitelinks[site_key] = Sitelink(title=title)
    return sitelinks


def parse_entity(line: str) -> Optional[Entity]:
    """Decode one dump line; None for malformed records or records without sitelinks."""
    try:
        raw = json.loads(line)
    except ValueError:
        logger.debug("Skipping undecodable record: %.80s", line)
        return None
    if not isinstance(raw, dict):
        return None
    entity_id = raw.get("id")
    if not _is_text(entity_id):
        return None
    sitelinks = _parse_sitelinks(raw.get("sitelinks"))
    if not sitelinks:
        return None
    return Entity(id=entity_id, sitelinks=sitelinks)


def iter_entities(lines: Iterable[str]) -> Iterator[Entity]:
    return filter(None, map(parse_entity, lines))


def split_site_key(site_key: str) -> Optional[SiteKey]:
    """Split e.g. "enwikisource" into SiteKey("en", "source").

    Returns None when the key has no "wiki" marker; such sitelinks get no
    store entry.
    """
    parts = site_key.split(SITE_KEY_MARKER)
    if len(parts) < 2:
        return None
    lang = parts[0] or UNDETERMINED_LANG
    site = parts[1]
    if not site and lang in LANGUAGELESS_SITES:
        lang, site = UNDETERMINED_LANG, lang
    return SiteKey(lang=lang, site=site)
