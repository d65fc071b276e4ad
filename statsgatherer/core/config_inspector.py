"""Config-state inspector — infers an item's disabled flag from its raw XML.

The raw configuration is first converted into a generic key/value tree
(dicts, lists and scalars), then the top-level entries are scanned for the
first nested section.  Only that first section is checked for a
``disabled`` key; later sections are never inspected.

Inspection fails open: any parse problem means "not disabled".
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Any

logger = logging.getLogger(__name__)

DISABLED_KEY = "disabled"
CONTENT_KEY = "content"

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")
_INT = re.compile(r"^-?\d+$")
_FLOAT = re.compile(r"^-?\d+\.\d+([eE][-+]?\d+)?$")


class ConfigInspectionError(ValueError):
    """Raised when a raw configuration cannot be inspected."""


# ---------------------------------------------------------------------------
# XML -> generic tree
# ---------------------------------------------------------------------------


def coerce_scalar(text: str) -> Any:
    """Coerce element text into a bool, None, number or the string itself."""
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _INT.match(text):
        return int(text)
    if _FLOAT.match(text):
        return float(text)
    return text


def _accumulate(node: dict[str, Any], key: str, value: Any) -> None:
    # Repeated keys collapse into a list, in document order.
    if key not in node:
        node[key] = value
    elif isinstance(node[key], list):
        node[key].append(value)
    else:
        node[key] = [node[key], value]


def _element_value(elem: ET.Element) -> Any:
    children = list(elem)
    text = (elem.text or "").strip()
    if not children and not elem.attrib:
        return coerce_scalar(text)

    node: dict[str, Any] = {}
    for attr, raw in elem.attrib.items():
        _accumulate(node, attr, coerce_scalar(raw))
    if text:
        _accumulate(node, CONTENT_KEY, coerce_scalar(text))
    for child in children:
        _accumulate(node, child.tag, _element_value(child))
        tail = (child.tail or "").strip()
        if tail:
            _accumulate(node, CONTENT_KEY, coerce_scalar(tail))
    return node


def xml_to_tree(raw_config: str) -> dict[str, Any]:
    """Convert raw XML into ``{root_tag: value}``.

    Attributes and child elements become keys of their element's dict,
    repeated children become lists, and leaf text is coerced with
    :func:`coerce_scalar`.  An empty leaf becomes ``""``.

    Raises
    ------
    ConfigInspectionError
        If the text is not well-formed XML.
    """
    # expat rejects some declarations CI hosts write (e.g. version='1.1').
    body = _XML_DECLARATION.sub("", raw_config.lstrip("\ufeff"), count=1)
    try:
        root = ET.fromstring(body)
    except (ET.ParseError, ValueError) as exc:
        raise ConfigInspectionError(f"Malformed configuration: {exc}") from exc
    return {root.tag: _element_value(root)}


# ---------------------------------------------------------------------------
# Disabled-flag scan
# ---------------------------------------------------------------------------


def inspect_config(raw_config: str) -> bool:
    """Return the disabled flag of *raw_config*, raising on bad input.

    Scans top-level entries in document order and stops at the first whose
    value is a nested dict.  If that dict carries ``disabled`` its value is
    returned; otherwise the result is ``False``.

    Raises
    ------
    ConfigInspectionError
        If the XML is malformed or the ``disabled`` value is not a boolean.
    """
    tree = xml_to_tree(raw_config)
    for key, value in tree.items():
        if not isinstance(value, dict):
            continue
        if DISABLED_KEY not in value:
            return False
        flag = value[DISABLED_KEY]
        if not isinstance(flag, bool):
            raise ConfigInspectionError(
                f"<{key}>/{DISABLED_KEY} is not a boolean: {flag!r}"
            )
        return flag
    return False


def is_disabled(raw_config: str, item_label: str = "") -> bool:
    """Fail-open variant of :func:`inspect_config`.

    Any inspection error is logged and treated as "enabled".
    """
    try:
        return inspect_config(raw_config)
    except ConfigInspectionError as exc:
        logger.warning(
            "Could not determine disabled state for %s, assuming active: %s",
            item_label or "<unknown item>",
            exc,
        )
        return False
