from __future__ import annotations

from typing import Any, Dict, Optional

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError


_STR_OR_NULL = {"type": ["string", "null"]}

CONTROL_ELEMENTS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["d", "p"],
    "properties": {
        "d": {"type": "string", "minLength": 1},
        "p": {"type": "string"},
        "c": _STR_OR_NULL,
        "k": _STR_OR_NULL,
        "i": _STR_OR_NULL,
        "b": _STR_OR_NULL,
        "f": _STR_OR_NULL,
    },
}

_CANDIDATE = {
    "type": "object",
    "required": ["firstName", "lastName"],
    "properties": {
        "firstName": {"type": "string"},
        "lastName": {"type": "string"},
        "ballotPaperTitle": _STR_OR_NULL,
    },
}

_QUESTION = {
    "type": "object",
    "required": ["position", "label"],
    "properties": {
        "position": {"type": ["integer", "number", "string"]},
        "label": {"type": "string"},
        "ballotPaperTitle": _STR_OR_NULL,
    },
}

CONTROL_RESPONSE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "voteLabel": _STR_OR_NULL,
        "voteSubLabel": _STR_OR_NULL,
        "electionLabel": _STR_OR_NULL,
        "ballotTitle": _STR_OR_NULL,
        "candidates": {"type": ["object", "null"], "additionalProperties": _CANDIDATE},
        "questions": {"type": ["object", "null"], "additionalProperties": _QUESTION},
        "questionsApprovalLabel": _STR_OR_NULL,
        "questionsRefusalLabel": _STR_OR_NULL,
        "b": _STR_OR_NULL,
    },
}

_validator_cache: Dict[int, Draft202012Validator] = {}


def _get_validator(schema: Dict[str, Any]) -> Draft202012Validator:
    k = id(schema)
    if k in _validator_cache:
        return _validator_cache[k]
    Draft202012Validator.check_schema(schema)
    v = Draft202012Validator(schema)
    _validator_cache[k] = v
    return v


def first_error(doc: Any, schema: Dict[str, Any]) -> Optional[ValidationError]:
    errs = sorted(_get_validator(schema).iter_errors(doc), key=lambda e: [str(x) for x in e.path])
    return errs[0] if errs else None


def error_field(err: ValidationError) -> Optional[str]:
    """Top-level property the error is about, if any."""
    if err.path:
        return str(err.path[0])
    if err.validator == "required":
        missing = [k for k in err.validator_value if isinstance(err.instance, dict) and k not in err.instance]
        return missing[0] if missing else None
    return None


def describe(err: ValidationError) -> str:
    loc = ".".join(str(x) for x in err.path) if err.path else "<root>"
    return f"{loc}: {err.message}"
