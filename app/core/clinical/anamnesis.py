"""
Anamnesis Normalisation

Converts a loosely-typed anamnesis record (API payload or a row from the
clinic's intake form) into a typed PatientProfile. This is the only place
free text is scanned; the rule modules work on enums and booleans.

Unknown or blank values fall to the conservative member of each enum, so a
sparse record under-treats rather than over-treats.
"""
from __future__ import annotations

import re
from typing import Any, List, Mapping

from app.utils import InvalidProfileError, get_logger
from .base import PatientProfile, Phototype, Sagging, Sex, SkinBiotype, SunExposure
from .keywords import (
    ALLERGEN_PATTERNS,
    AUTOIMMUNE_KEYWORDS,
    BIOTYPE_KEYWORDS,
    COMPLAINT_KEYWORDS,
    IMMUNOSUPPRESSIVE_KEYWORDS,
    PHOTOTYPE_CODES,
    PHOTOTYPE_PREFIXES,
    SAGGING_KEYWORDS,
    SEX_CODES,
    SEX_KEYWORDS,
    SUN_EXPOSURE_KEYWORDS,
    contains_any,
    fold,
    match_all,
    match_first,
    match_patterns,
)

logger = get_logger(__name__)

# Intake-form column → canonical field. Several form columns may feed the
# same field (e.g. pele_sensivel and rosacea both mean sensitive skin).
FIELD_ALIASES: Mapping[str, str] = {
    "idade": "age",
    "sexo": "sex",
    "queixa_principal": "complaints",
    "queixas": "complaints",
    "fototipo": "skin_phototype",
    "biotipo_cutaneo": "skin_biotype",
    "biotipo": "skin_biotype",
    "flacidez": "sagging",
    "gestante": "pregnant",
    "lactante": "lactating",
    "uso_retinoide": "isotretinoin_use",
    "uso_isotretinoina": "isotretinoin_use",
    "exposicao_solar": "sun_exposure",
    "historico_queloide": "keloid_history",
    "alergias_medicamentosas": "allergies",
    "alergia_cosmeticos": "allergies",
    "lista_medicacoes": "medications",
    "doencas_cronicas": "chronic_conditions",
    "facial_patologias": "skin_conditions",
    "pele_sensivel": "sensitive_skin",
    "rosacea": "sensitive_skin",
}

_TRUE_STRINGS = frozenset({"true", "yes", "y", "sim", "s", "1"})

_LIST_FIELDS = frozenset({"complaints", "allergies", "medications", "chronic_conditions", "skin_conditions"})

_FLAG_FIELDS = frozenset({
    "pregnant", "lactating", "isotretinoin_use", "keloid_history", "melasma", "acne",
    "sensitive_skin", "immunosuppressive_medication", "autoimmune_disease",
})

# Leading roman or arabic phototype code, e.g. "v (morena escura)" -> "v"
_PHOTOTYPE_CODE = re.compile(r"(vi|iv|v|i{1,3}|[1-6])\b")


def normalize_anamnesis(record: Mapping[str, Any]) -> PatientProfile:
    """
    Build a PatientProfile from a raw anamnesis mapping.

    Raises:
        InvalidProfileError: age is missing, not an integer, or negative.
    """
    data = _canonicalise(record)

    complaint_texts = data.get("complaints", [])
    skin_conditions = data.get("skin_conditions", [])
    complaints = match_all(complaint_texts, COMPLAINT_KEYWORDS)

    melasma = _flag(data.get("melasma")) or any("melasma" in fold(t) for t in skin_conditions)
    acne = _flag(data.get("acne")) or any("acne" in fold(t) for t in skin_conditions)

    medications = " ".join(fold(t) for t in data.get("medications", []))
    chronic = " ".join(fold(t) for t in data.get("chronic_conditions", []))

    profile = PatientProfile(
        age=_parse_age(data.get("age")),
        sex=_parse_sex(data.get("sex")),
        complaints=complaints,
        skin_phototype=_parse_phototype(data.get("skin_phototype")),
        skin_biotype=match_first(data.get("skin_biotype"), BIOTYPE_KEYWORDS) or SkinBiotype.UNKNOWN,
        sagging=match_first(data.get("sagging"), SAGGING_KEYWORDS) or Sagging.NONE_MILD,
        pregnant=_flag(data.get("pregnant")),
        lactating=_flag(data.get("lactating")),
        isotretinoin_use=_flag(data.get("isotretinoin_use")),
        sun_exposure=match_first(data.get("sun_exposure"), SUN_EXPOSURE_KEYWORDS) or SunExposure.UNKNOWN,
        melasma=melasma,
        keloid_history=_flag(data.get("keloid_history")),
        allergies=match_patterns(data.get("allergies", []), ALLERGEN_PATTERNS),
        acne=acne,
        sensitive_skin=_flag(data.get("sensitive_skin")),
        immunosuppressive_medication=_flag(data.get("immunosuppressive_medication"))
        or contains_any(medications, IMMUNOSUPPRESSIVE_KEYWORDS),
        autoimmune_disease=_flag(data.get("autoimmune_disease"))
        or contains_any(chronic, AUTOIMMUNE_KEYWORDS),
    )
    logger.debug(
        f"normalize_anamnesis: age={profile.age} sex={profile.sex.value} "
        f"complaints={sorted(c.value for c in profile.complaints)}"
    )
    return profile


# ── Helpers ───────────────────────────────────────────────────────────────────

def _canonicalise(record: Mapping[str, Any]) -> dict:
    """
    Resolve form aliases.

    List aliases are merged and flag aliases OR-ed, so a "false" in one
    column never clears a contraindication recorded in another. For other
    fields the first non-blank value wins.
    """
    data: dict = {}
    for key, value in record.items():
        name = FIELD_ALIASES.get(key, key)
        if name in _LIST_FIELDS:
            data[name] = data.get(name, []) + _texts(value)
        elif name in _FLAG_FIELDS:
            data[name] = data.get(name, False) or _flag(value)
        elif _is_blank(data.get(name)):
            data[name] = value
    return data


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _texts(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return fold(value) in _TRUE_STRINGS
    return bool(value)


def _parse_age(value: Any) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidProfileError("age is required", field="age")
    if isinstance(value, bool):
        raise InvalidProfileError(f"age must be an integer, got {value!r}", field="age")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidProfileError(f"age must be an integer, got {value!r}", field="age")
    # PatientProfile rejects negative and non-integer ages
    return value


def _parse_sex(value: Any) -> Sex:
    folded = fold(value)
    if folded in SEX_CODES:
        return SEX_CODES[folded]
    return match_first(folded, SEX_KEYWORDS) or Sex.FEMALE


def _parse_phototype(value: Any) -> Phototype:
    folded = fold(value)
    # "Fitzpatrick type V", "Fototipo tipo V": strip every leading label
    stripped = True
    while stripped:
        stripped = False
        for prefix in PHOTOTYPE_PREFIXES:
            if folded.startswith(prefix):
                folded = folded[len(prefix):].strip(" :-")
                stripped = True
    match = _PHOTOTYPE_CODE.match(folded)
    if match is None:
        return Phototype.UNKNOWN
    return PHOTOTYPE_CODES[match.group(1)]


def describe_profile(profile: PatientProfile) -> str:
    """One-line summary used in log messages."""
    flags = [
        name for name in ("pregnant", "lactating", "isotretinoin_use", "melasma", "keloid_history")
        if getattr(profile, name)
    ]
    return (
        f"{profile.age}y {profile.sex.value}, phototype {profile.skin_phototype.value}, "
        f"sagging {profile.sagging.value}, flags={flags or 'none'}"
    )
