"""Canonical store keys for (language, project site, page title) triples.

A key looks like ``en:barack_obama`` or ``en.wikisource:some_title``. Titles
are case-folded with full Unicode case folding; for Turkic languages the
dotted/dotless I mappings replace the default ones. Whitespace and control
characters become underscores.
"""
from __future__ import annotations

import unicodedata

# https://en.wikipedia.org/wiki/List_of_Turkic_languages
TURKIC_LANGUAGES = frozenset(
    {
        "aib",  # Äynu
        "alt",  # Southern Altai
        "atv",  # Northern Altai
        "az",  # Azerbaijani
        "ba",  # Bashkir
        "chg",  # Chagatai
        "cjs",  # Shor
        "clw",  # Chulym
        "crh",  # Crimean Tatar
        "cv",  # Chuvash
        "dlg",  # Dolgan
        "gag",  # Gagauz
        "ili",  # Ili Turki
        "jct",  # Krymchak
        "kaa",  # Karakalpak
        "kdr",  # Karaim
        "kim",  # Tofa
        "kjh",  # Khakas
        "kk",  # Kazakh
        "klj",  # Khalaj
        "kmz",  # Khorasani Turkic
        "krc",  # Karachay-Balkar
        "kum",  # Kumyk
        "ky",  # Kyrgyz
        "nog",  # Nogai
        "ota",  # Ottoman Turkish
        "otk",  # Orkhon Turkic
        "oui",  # Old Uyghur
        "qwm",  # Kipchak
        "qxq",  # Qashqai
        "sah",  # Yakut
        "slq",  # Salchuq
        "sty",  # Siberian Tatar
        "tk",  # Turkmen
        "tr",  # Turkish
        "tt",  # Tatar
        "tyv",  # Tuvan
        "ug",  # Uyghur
        "uum",  # Urum
        "uz",  # Uzbek
        "xbo",  # Bulgar
        "xpc",  # Pecheneg
        "xqa",  # Middle Turkic
        "ybe",  # Western Yugur
        "zkh",  # Khorezmian
        "zkz",  # Khazar
    }
)

# CaseFolding.txt status "T" entries; everything else folds as status C+F.
TURKIC_FOLDING = {
    0x0049: "ı",  # LATIN CAPITAL LETTER I -> LATIN SMALL LETTER DOTLESS I
    0x0130: "i",  # LATIN CAPITAL LETTER I WITH DOT ABOVE -> LATIN SMALL LETTER I
}

SITE_MARKER = ".wiki"
KEY_SEPARATOR = ":"
REPLACEMENT_CHAR = "_"


def is_turkic(lang: str) -> bool:
    return lang in TURKIC_LANGUAGES


def case_fold(text: str, turkic: bool = False) -> str:
    """Full Unicode case folding, optionally with the Turkic I mappings."""
    if turkic:
        text = text.translate(TURKIC_FOLDING)
    return text.casefold()


def _is_blank(ch: str) -> bool:
    return ch.isspace() or unicodedata.category(ch) == "Cc"


def canonicalize_title(title: str, lang: str = "") -> str:
    folded = case_fold(title, turkic=is_turkic(lang))
    return "".join(REPLACEMENT_CHAR if _is_blank(ch) else ch for ch in folded)


def make_key(lang: str, site: str, title: str) -> bytes:
    """Encode ``lang[.wiki<site>]:<canonical title>`` as UTF-8 key bytes."""
    parts = [lang]
    if site:
        parts.append(SITE_MARKER)
        parts.append(site)
    parts.append(KEY_SEPARATOR)
    parts.append(canonicalize_title(title, lang))
    return "".join(parts).encode("utf-8")
