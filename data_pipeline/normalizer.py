"""
Row normalization at the storage boundary
- Spreadsheet / form values for category and gender
- Joined relations that arrive either as a list or as a single object
"""
from typing import Optional, Dict, Any, List, Union

from loguru import logger

from tournament.constants import AGE_CATEGORIES
from tournament.exceptions import InvalidInputError
from tournament.models import Archer


# =============================================================================
# Normalization maps
# =============================================================================

GENDER_NORMALIZE_MAP = {
    "male": "male",
    "m": "male",
    "masculino": "male",
    "hombre": "male",
    "female": "female",
    "f": "female",
    "femenino": "female",
    "mujer": "female",
    "": None,
    None: None,
}

# Checked in order after an exact category match
CATEGORY_PATTERNS = [
    (("10", "sub10"), "u10"),
    (("13", "sub13"), "u13"),
    (("15", "sub15"), "u15"),
    (("18", "cadete"), "u18"),
    (("21", "junior"), "u21"),
    (("mayor",), "senior"),
]

DEFAULT_CATEGORY = "open"

# Column aliases used by imported sheets
FIELD_ALIASES = {
    "first_name": ("first_name", "nombre", "Nombre"),
    "last_name": ("last_name", "apellido", "Apellido"),
    "club": ("club", "Club"),
    "age_category": ("age_category", "categoria", "Categoria"),
    "gender": ("gender", "genero", "Genero", "sexo", "Sexo"),
}


# =============================================================================
# Value normalization
# =============================================================================

def normalize_gender(gender: Optional[str]) -> Optional[str]:
    """Gender normalization: M / masculino -> male. None when unknown"""
    if gender is None:
        return None
    gender_clean = gender.strip().lower() if isinstance(gender, str) else str(gender)
    return GENDER_NORMALIZE_MAP.get(gender_clean)


def normalize_category(category: Optional[str]) -> Optional[str]:
    """
    Age category normalization: "Sub 13" -> u13, "Cadete" -> u18

    Blank values fall back to open; unrecognized values return None.
    """
    if category is None:
        return DEFAULT_CATEGORY
    category_clean = category.strip().lower()

    if not category_clean:
        return DEFAULT_CATEGORY
    if category_clean in AGE_CATEGORIES:
        return category_clean

    for needles, code in CATEGORY_PATTERNS:
        if any(needle in category_clean for needle in needles):
            return code

    return None


def normalize_relation(value: Union[List[Dict[str, Any]], Dict[str, Any], None]) -> Optional[Dict[str, Any]]:
    """A joined relation as a single record (first item of a list)"""
    if isinstance(value, list):
        return value[0] if value else None
    return value


# =============================================================================
# Record normalization
# =============================================================================

def _pick(row: Dict[str, Any], field: str) -> str:
    for alias in FIELD_ALIASES[field]:
        value = row.get(alias)
        if value:
            return str(value).strip()
    return ""


def normalize_archer_row(row: Dict[str, Any]) -> Archer:
    """
    Imported row -> Archer

    Raises:
        InvalidInputError: missing names, unknown category or gender
    """
    errors = []

    first_name = _pick(row, "first_name")
    last_name = _pick(row, "last_name")
    if not first_name:
        errors.append("first name required")
    if not last_name:
        errors.append("last name required")

    category_raw = _pick(row, "age_category")
    age_category = normalize_category(category_raw)
    if age_category is None:
        errors.append(f"invalid category: {category_raw}")

    gender_raw = _pick(row, "gender")
    gender = normalize_gender(gender_raw)
    if gender is None:
        errors.append(f"invalid gender: {gender_raw!r}")

    if errors:
        logger.warning(f"Rejected archer row {row}: {errors}")
        raise InvalidInputError("; ".join(errors))

    return Archer(
        id=str(row.get("id") or ""),
        first_name=first_name,
        last_name=last_name,
        club=_pick(row, "club") or None,
        age_category=age_category,
        gender=gender,
    )


def normalize_assignment_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Assignment rows with their joined archer flattened to one record

    A missing archer becomes an empty-name placeholder.
    """
    normalized = []
    for row in rows:
        record = row.copy()
        record["archer"] = normalize_relation(row.get("archer")) or {"first_name": "", "last_name": ""}
        record["is_finished"] = bool(row.get("is_finished", False))
        normalized.append(record)
    return normalized
