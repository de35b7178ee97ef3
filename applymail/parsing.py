"""
Parse-or-fallback handling for model replies.

A reply may carry an already validated structured object (when the provider
honoured the output schema) and always carries the raw text. The structured
object wins; otherwise the raw text is decoded as JSON, and failing that the
span between the first "{" and the last "}" is decoded.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Union

from pydantic import BaseModel


@dataclass(frozen=True)
class ParseOk:
    data: Dict[str, Any] = field(default_factory=dict)
    ok: bool = True


@dataclass(frozen=True)
class ParseFailed:
    reason: str
    ok: bool = False


ParseResult = Union[ParseOk, ParseFailed]


def extract_json_object(text: str) -> ParseResult:
    text = text or ""
    try:
        obj = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end == -1 or end < start:
            return ParseFailed("no JSON object in reply")
        try:
            obj = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            return ParseFailed(f"invalid JSON: {e}")

    if not isinstance(obj, dict):
        return ParseFailed(f"expected a JSON object, got {type(obj).__name__}")
    return ParseOk(obj)


def parse_reply(
    parsed: Optional[Any],
    text: Optional[str],
    required_strings: Iterable[str] = (),
) -> ParseResult:
    if isinstance(parsed, BaseModel):
        result: ParseResult = ParseOk(parsed.model_dump(by_alias=True))
    elif isinstance(parsed, dict):
        result = ParseOk(dict(parsed))
    else:
        result = extract_json_object(text or "")

    if not result.ok:
        return result

    for key in required_strings:
        if not isinstance(result.data.get(key), str):
            return ParseFailed(f"missing or non-string field: {key}")
    return result
