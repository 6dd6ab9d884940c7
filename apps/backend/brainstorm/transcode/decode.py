from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Union

from brainstorm.config import TRANSCODE_MAX_DEPTH
from brainstorm.services.errors import StructuralDepthError, XmlParseError

logger = logging.getLogger(__name__)

CanonicalValue = Union[str, dict[str, "CanonicalValue"], list["CanonicalValue"], None]

ROOT_TAG = "_root"

# Only bare, attribute-free tags are markup; everything else is content.
_TAG_RE = re.compile(r"(</?[^\W\d][\w.\-]*\s*/?>)")
_BARE_AMP_RE = re.compile(r"&(?!(?:amp|lt|gt|quot|apos|#\d+|#[xX][0-9a-fA-F]+);)")
_TEXT_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    "-": "&#45;",
    '"': "&quot;",
    "'": "&apos;",
    "“": "&#8220;",
    "”": "&#8221;",
    "‘": "&#8216;",
    "’": "&#8217;",
}
_TEXT_ESCAPE_RE = re.compile("|".join(re.escape(ch) for ch in _TEXT_ESCAPES))


def _escape_text(segment: str) -> str:
    segment = _BARE_AMP_RE.sub("&amp;", segment)
    return _TEXT_ESCAPE_RE.sub(lambda m: _TEXT_ESCAPES[m.group(0)], segment)


def pre_escape(text: str) -> str:
    """Escape characters that are common in prose but unsafe as raw XML.

    Tag markup is left alone. An ``&`` that already starts an entity
    reference is kept, so escaped input is not escaped twice.
    """
    parts = _TAG_RE.split(text)
    # re.split with one capturing group alternates content / tag.
    return "".join(part if i % 2 else _escape_text(part) for i, part in enumerate(parts))


def parse(text: str) -> ET.Element:
    wrapped = f"<{ROOT_TAG}>{pre_escape(text)}</{ROOT_TAG}>"
    try:
        return ET.fromstring(wrapped)
    except ET.ParseError as exc:
        line, column = exc.position
        if line == 1:
            column = max(0, column - len(ROOT_TAG) - 2)
        logger.warning("Failed to parse model output at line %s column %s: %s", line, column, exc)
        raise XmlParseError(f"malformed markup: {exc}", text=text, position=(line, column)) from exc


def normalize(element: ET.Element, *, max_depth: int | None = None) -> CanonicalValue:
    """Collapse an element tree into a CanonicalValue.

    A tag seen once under its parent maps to its own value; a repeated tag
    maps to a list. Whether a single occurrence should have been a list is
    left for the schema validator to decide.
    """
    limit = TRANSCODE_MAX_DEPTH if max_depth is None else max_depth
    return _normalize(element, "", 0, limit)


def _normalize(element: ET.Element, path: str, depth: int, limit: int) -> CanonicalValue:
    if depth > limit:
        raise StructuralDepthError(path, element.tag, f"nesting deeper than {limit} levels")

    children = list(element)
    if not children:
        text = element.text
        if text is None or not text.strip():
            return None
        return text

    record: dict[str, CanonicalValue] = {}
    repeated: set[str] = set()
    for child in children:
        value = _normalize(child, f"{path}.{child.tag}" if path else child.tag, depth + 1, limit)
        tag = child.tag
        if tag not in record:
            record[tag] = value
        elif tag in repeated:
            record[tag].append(value)  # type: ignore[union-attr]
        else:
            record[tag] = [record[tag], value]
            repeated.add(tag)
    return record


def decode(text: str, *, max_depth: int | None = None) -> CanonicalValue:
    """Parse untrusted model output into a CanonicalValue.

    The text may hold several top-level sibling elements and stray prose
    around them; the synthetic wrapper is stripped from the result.
    """
    logger.debug("Decoding %d characters of model output", len(text or ""))
    root = parse(text or "")
    return normalize(root, max_depth=max_depth)
