import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .models import ApplicationContext, DEFAULTS, WIRE_NAMES
from .text import derive_hr_email

ROLE_KEYWORDS = [
    "developer", "engineer", "designer", "manager", "intern", "analyst",
    "scientist", "architect", "consultant", "administrator",
]

ROLE_QUALIFIERS = [
    "full stack", "full-stack", "fullstack", "backend", "back-end", "frontend",
    "front-end", "software", "data", "web", "mobile", "cloud", "devops",
    "machine learning", "ml", "qa", "product", "project", "ui", "ux",
    "senior", "junior", "lead", "principal",
]

ROLE_PATTERN = re.compile(
    r"\b(?:(?:%s)\s+)?(?:%s)" % ("|".join(ROLE_QUALIFIERS), "|".join(ROLE_KEYWORDS)),
    re.IGNORECASE,
)
COMPANY_PATTERN = re.compile(r"\bat\s+([A-Za-z0-9\s&]+)", re.IGNORECASE)

FREE_TEXT_SKILLS = "React, Node.js, and modern web development"


@dataclass
class NormalizedRequest:
    context: ApplicationContext
    parsed_input: Dict[str, Any]
    raw_text: Optional[str] = None


def extract_from_free_text(text: str) -> Dict[str, str]:
    """
    Best-effort extraction of role and company from free text.
    Everything else takes fixed defaults.
    """
    role_match = ROLE_PATTERN.search(text)
    company_match = COMPANY_PATTERN.search(text)

    company = company_match.group(1).strip() if company_match else ""
    if not company:
        company = DEFAULTS["company"]

    return {
        "name": DEFAULTS["name"],
        "hrEmail": derive_hr_email(company),
        "jobRole": role_match.group(0) if role_match else DEFAULTS["job_role"],
        "company": company,
        "education": DEFAULTS["education"],
        "skills": FREE_TEXT_SKILLS,
        "location": DEFAULTS["location"],
    }


def supplied(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def fill_structured(payload: Dict[str, Any]) -> Dict[str, str]:
    out = {}
    for attr, key in WIRE_NAMES.items():
        value = payload.get(key)
        if supplied(value):
            out[key] = value
        else:
            out[key] = DEFAULTS[attr]

    if not supplied(payload.get("hrEmail")):
        out["hrEmail"] = derive_hr_email(payload.get("company"))
    return out


def free_text_of(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        for key in ("input", "rawText"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return None


def normalize_request(payload: Any) -> NormalizedRequest:
    """
    Turn a request body into an ApplicationContext.

    Accepts a raw string, {"input": "..."} / {"rawText": "..."}, or an object of
    named fields. A missing body counts as an empty object.
    Non-object bodies (lists, numbers) raise TypeError.
    """
    if payload is None:
        payload = {}

    text = free_text_of(payload)
    if text is not None:
        parsed = extract_from_free_text(text)
        # hrEmail in parsed_input is a preview; the composer derives it again
        # from whatever company extraction settles on
        return NormalizedRequest(
            context=replace(ApplicationContext.from_dict(parsed), hr_email=""),
            parsed_input=parsed,
            raw_text=text,
        )

    if not isinstance(payload, dict):
        raise TypeError(f"Unsupported request body of type {type(payload).__name__}")

    parsed = fill_structured(payload)
    context = ApplicationContext.from_dict(parsed)
    if not supplied(payload.get("hrEmail")):
        context = replace(context, hr_email="")
    return NormalizedRequest(context=context, parsed_input=parsed)
