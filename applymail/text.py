import re

from .models import DEFAULTS

SUBJECT_LIMIT = 90
ELLIPSIS = "..."

_WS = re.compile(r"\s+")


def sanitize_text(value, fallback: str = "") -> str:
    """
    Collapse internal whitespace and trim.
    Non-strings and strings that end up empty return `fallback`.
    """
    if not isinstance(value, str):
        return fallback
    cleaned = _WS.sub(" ", value).strip()
    return cleaned or fallback


def to_plain_multiline(value) -> str:
    text = "" if value is None else str(value)
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def derive_hr_email(company) -> str:
    """hr@<company, lowercased, no whitespace>.com; the placeholder when there is no real company."""
    if not isinstance(company, str) or company.strip().lower() == DEFAULTS["company"]:
        return DEFAULTS["hr_email"]
    domain = _WS.sub("", company.lower())
    if not domain:
        return DEFAULTS["hr_email"]
    return f"hr@{domain}.com"


def truncate_subject(subject: str, limit: int = SUBJECT_LIMIT) -> str:
    if len(subject) <= limit:
        return subject
    return subject[: limit - len(ELLIPSIS)] + ELLIPSIS
