"""
Keyword Tables for Anamnesis Normalisation

Immutable synonym tables used by anamnesis.py to turn free-text clinic
records into typed enums. Matching is case-insensitive substring matching
on accent-stripped text, so "Olheiras profundas" and "dark circles" both
land on Complaint.DARK_CIRCLES.

Clinic records are written in Portuguese; English synonyms are kept for
records entered through the API.
"""
from __future__ import annotations

import re
import unicodedata
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, TypeVar

from .base import Allergen, Complaint, Phototype, Sagging, Sex, SkinBiotype, SunExposure

E = TypeVar("E")

# ── Complaints ───────────────────────────────────────────────────────────────
COMPLAINT_KEYWORDS: Mapping[Complaint, Tuple[str, ...]] = MappingProxyType({
    Complaint.WRINKLES:     ("wrinkle", "line", "ruga", "linha", "pe de galinha", "crow"),
    Complaint.DARK_CIRCLES: ("dark circle", "olheira", "tear trough", "goteira"),
    Complaint.NASOLABIAL:   ("mustache", "moustache", "nasolabial", "bigode"),
    Complaint.SAGGING:      ("sagging", "laxity", "flacidez", "jowl"),
    Complaint.SCARS:        ("scar", "cicatriz"),
    Complaint.PORES:        ("pore", "poro"),
    Complaint.SPOTS:        ("spot", "pigment", "mancha", "hiperpigment", "melasma"),
    Complaint.LIPS:         ("lip", "labio"),
    Complaint.ACNE:         ("acne", "espinha"),
})

# ── Allergies ────────────────────────────────────────────────────────────────
# Word-bounded so "ovo" does not fire on "novo" or "novocaina"; "albumin"
# stays a substring to cover "ovalbumina".
ALLERGEN_PATTERNS: Mapping[Allergen, re.Pattern] = MappingProxyType({
    Allergen.EGG_ALBUMIN: re.compile(r"\beggs?\b|albumin|\bovos?\b"),
})

# ── Skin classification ──────────────────────────────────────────────────────
# Order matters: the first enum whose keyword matches wins, so "combination"
# is checked before "oily"/"dry" ("mista (oleosa na zona T)" is combination).
BIOTYPE_KEYWORDS: Tuple[Tuple[SkinBiotype, Tuple[str, ...]], ...] = (
    (SkinBiotype.COMBINATION, ("combination", "mixed", "mista")),
    (SkinBiotype.OILY,        ("oily", "oleos", "acneic", "acneica")),
    (SkinBiotype.DRY,         ("dry", "seca", "xero")),
    (SkinBiotype.NORMAL,      ("normal", "eudermic", "eudermica")),
)

SAGGING_KEYWORDS: Tuple[Tuple[Sagging, Tuple[str, ...]], ...] = (
    (Sagging.SEVERE,    ("severe", "grave", "intens", "acentuada")),
    (Sagging.MODERATE,  ("moderate", "moderada")),
    (Sagging.NONE_MILD, ("none", "mild", "leve", "ausente", "nenhuma")),
)

SUN_EXPOSURE_KEYWORDS: Tuple[Tuple[SunExposure, Tuple[str, ...]], ...] = (
    (SunExposure.HIGH,     ("high", "alta", "intens", "frequent", "daily", "diaria")),
    (SunExposure.MODERATE, ("moderate", "moderada", "medium", "media")),
    (SunExposure.LOW,      ("low", "baixa", "rare", "rara", "none", "nenhuma")),
)

SEX_KEYWORDS: Tuple[Tuple[Sex, Tuple[str, ...]], ...] = (
    (Sex.FEMALE, ("female", "feminino", "woman", "mulher")),
    (Sex.MALE,   ("male", "masculino", "man", "homem")),
)
# Single-letter codes are matched exactly, never as substrings
SEX_CODES: Mapping[str, Sex] = MappingProxyType({"f": Sex.FEMALE, "m": Sex.MALE})

PHOTOTYPE_CODES: Mapping[str, Phototype] = MappingProxyType({
    "i": Phototype.I,     "1": Phototype.I,
    "ii": Phototype.II,   "2": Phototype.II,
    "iii": Phototype.III, "3": Phototype.III,
    "iv": Phototype.IV,   "4": Phototype.IV,
    "v": Phototype.V,     "5": Phototype.V,
    "vi": Phototype.VI,   "6": Phototype.VI,
})
PHOTOTYPE_PREFIXES: Tuple[str, ...] = ("fitzpatrick", "fototipo", "phototype", "type", "tipo")

# ── Audit flow: medications and chronic conditions ───────────────────────────
IMMUNOSUPPRESSIVE_KEYWORDS: Tuple[str, ...] = (
    "cortic", "prednis", "dexametason", "dexamethason", "ibuprof", "anti-inflamat",
    "anti-inflammat", "metotrexat", "methotrexat",
)
AUTOIMMUNE_KEYWORDS: Tuple[str, ...] = (
    "lupus", "artrite", "arthritis", "psoria", "autoimun", "autoimmun",
)


def fold(text: object) -> str:
    """Lower-case, strip accents and underscores ("Lábios" -> "labios")."""
    if text is None:
        return ""
    if isinstance(text, Enum):
        text = text.value
    decomposed = unicodedata.normalize("NFKD", str(text))
    folded = "".join(c for c in decomposed if not unicodedata.combining(c))
    return folded.replace("_", " ").lower().strip()


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def match_first(text: object, table: Tuple[Tuple[E, Tuple[str, ...]], ...]) -> Optional[E]:
    """Return the first enum in `table` whose keywords appear in `text`."""
    folded = fold(text)
    if not folded:
        return None
    for member, keywords in table:
        if contains_any(folded, keywords):
            return member
    return None


def match_all(texts: Iterable[object], table: Mapping[E, Tuple[str, ...]]) -> frozenset:
    """Return every enum in `table` with a keyword present in any of `texts`."""
    folded = [fold(t) for t in texts]
    return frozenset(
        member
        for member, keywords in table.items()
        if any(contains_any(text, keywords) for text in folded)
    )


def match_patterns(texts: Iterable[object], table: Mapping[E, re.Pattern]) -> frozenset:
    """Like match_all, for tables of compiled regular expressions."""
    folded = [fold(t) for t in texts]
    return frozenset(
        member
        for member, pattern in table.items()
        if any(pattern.search(text) for text in folded)
    )
