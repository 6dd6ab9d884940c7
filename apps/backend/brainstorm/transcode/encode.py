from __future__ import annotations

import json
import logging
from typing import Any, Mapping

logger = logging.getLogger(__name__)

_ESCAPES = (("&", "&amp;"), ("<", "&lt;"), (">", "&gt;"), ("\r", "&#13;"))


def _escape(text: str) -> str:
    for raw, entity in _ESCAPES:
        text = text.replace(raw, entity)
    return text


def _leaf_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if not isinstance(value, (int, float)):
        logger.debug("Coercing %s leaf to its string form", type(value).__name__)
    try:
        return str(value)
    except Exception:
        logger.debug("str() failed for %s leaf; falling back to repr", type(value).__name__)
        return repr(value)


def _element(tag: str, inner: str) -> str:
    return f"<{tag}>{inner}</{tag}>"


def _encode_value(tag: str, value: Any) -> str:
    if value is None:
        return _element(tag, "")

    if isinstance(value, (list, tuple)):
        if not value:
            return _element(tag, "")
        return "".join(_encode_value(tag, item) for item in value)

    if isinstance(value, Mapping):
        return _element(tag, _encode_mapping(value))

    return _element(tag, _escape(_leaf_text(value)))


def _encode_mapping(record: Mapping[str, Any]) -> str:
    parts: list[str] = []
    for key, value in record.items():
        parts.append(_encode_value(_escape(str(key)), value))
    return "".join(parts)


def encode(value: Mapping[str, Any] | str) -> str:
    """Serialize an ordered record into the XML-like text sent to the model.

    Every key becomes an open/close tag pair and every list element a repeated
    sibling tag. ``None``, empty lists and empty records still emit an empty
    tag pair so the field stays visible to the model. Leaves that are not
    strings are coerced with ``str()``; encoding never raises.

    A string argument is treated as JSON; if it does not decode to an object
    it is returned unchanged.
    """
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError:
            return value
        if not isinstance(decoded, dict):
            return value
        value = decoded

    if not isinstance(value, Mapping):
        logger.debug("encode() called with %s; returning empty fragment", type(value).__name__)
        return ""

    return _encode_mapping(value)
