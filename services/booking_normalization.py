"""
Submission normalization.
Canonicalizes validated form values before they are stored.
"""

import re
from typing import Any, Dict, Optional


MULTIPLE_WHITESPACE = re.compile(r'\s+')

# Fields whose internal whitespace runs collapse to one space
COLLAPSE_WHITESPACE_FIELDS = (
    "name",
    "father_name",
    "mother_name",
    "place_of_birth",
    "address",
    "city",
    "province",
    "occupation",
    "place_of_issue",
    "emergency_contact_name",
)

# Fields stored without any whitespace
STRIP_WHITESPACE_FIELDS = (
    "phone_number",
    "whatsapp_number",
    "emergency_contact_phone",
)

# Fields stored trimmed only
TRIM_FIELDS = (
    "postal_code",
    "nik_number",
)


def collapse_whitespace(value: str) -> str:
    """Trim and collapse internal whitespace runs to a single space."""
    return MULTIPLE_WHITESPACE.sub(' ', value).strip()


def strip_whitespace(value: str) -> str:
    """Remove every whitespace character."""
    return MULTIPLE_WHITESPACE.sub('', value)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def normalize_passport_number(value: str) -> str:
    return value.strip().upper()


def normalize_illness(value: Optional[str], specific_disease: bool) -> Optional[str]:
    """Illness text is kept only for applicants declaring a specific disease."""
    if not specific_disease or value is None:
        return None
    value = value.strip()
    return value or None


def normalize_submission(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize a validated submission.

    Only string values are touched; fields missing from ``data``
    stay missing, so partial updates can be normalized too.
    Applying this twice yields the same result as applying it once.

    Args:
        data: Schema-valid form data

    Returns:
        New dict with canonical values
    """
    normalized = dict(data)

    for field_name in COLLAPSE_WHITESPACE_FIELDS:
        if isinstance(normalized.get(field_name), str):
            normalized[field_name] = collapse_whitespace(normalized[field_name])

    for field_name in STRIP_WHITESPACE_FIELDS:
        if isinstance(normalized.get(field_name), str):
            normalized[field_name] = strip_whitespace(normalized[field_name])

    for field_name in TRIM_FIELDS:
        if isinstance(normalized.get(field_name), str):
            normalized[field_name] = normalized[field_name].strip()

    if isinstance(normalized.get("email"), str):
        normalized["email"] = normalize_email(normalized["email"])

    if isinstance(normalized.get("passport_number"), str):
        normalized["passport_number"] = normalize_passport_number(normalized["passport_number"])

    if "illness" in normalized or "specific_disease" in normalized:
        normalized["illness"] = normalize_illness(
            normalized.get("illness"),
            bool(normalized.get("specific_disease")),
        )

    return normalized
