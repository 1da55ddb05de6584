"""Content-type driven body decoding.

The request's media type selects one member of the closed ``BodyKind``
enumeration; ``decode_body`` then dispatches on it with a ``match``.
"""

import json
from enum import Enum
from typing import Any
from xml.etree import ElementTree

from wren.errors import DecodeError, UnsupportedMediaType
from wren.http.forms import parse_form_data


class BodyKind(Enum):
    JSON = "json"
    FORM = "form"
    XML = "xml"
    UNSUPPORTED = "unsupported"


_FORM_TYPES = frozenset({"application/x-www-form-urlencoded", "multipart/form-data"})
_XML_TYPES = frozenset({"application/xml", "text/xml"})


def body_kind(content_type: str) -> BodyKind:
    """Classify a Content-Type header value."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == "application/json" or media_type.endswith("+json"):
        return BodyKind.JSON
    if media_type in _FORM_TYPES:
        return BodyKind.FORM
    if media_type in _XML_TYPES or media_type.endswith("+xml"):
        return BodyKind.XML
    return BodyKind.UNSUPPORTED


def decode_body(body: bytes, content_type: str) -> Any:
    """Decode *body* according to *content_type*.

    Returns the JSON object graph, a ``FormData``, or a dict built from
    the XML document's root element.

    Raises:
        UnsupportedMediaType: No decoder exists for the content type.
        DecodeError: The body is malformed.
    """
    match body_kind(content_type):
        case BodyKind.JSON:
            return decode_json(body)
        case BodyKind.FORM:
            return parse_form_data(body, content_type)
        case BodyKind.XML:
            return decode_xml(body)
        case BodyKind.UNSUPPORTED:
            raise UnsupportedMediaType(content_type)


def decode_json(body: bytes) -> Any:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError("JSON body is not valid UTF-8", offset=exc.start) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        # exc.pos counts characters; report bytes
        offset = len(text[: exc.pos].encode("utf-8"))
        raise DecodeError(f"Malformed JSON: {exc.msg}", offset=offset) from exc


def decode_xml(body: bytes) -> dict[str, Any]:
    """Parse an XML document into a dict keyed by child element tag.

    Leaf elements become their stripped text; elements with children
    become nested dicts; repeated tags collect into a list.
    """
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as exc:
        line, column = exc.position
        offset = sum(len(part) + 1 for part in body.split(b"\n")[: line - 1]) + column
        raise DecodeError(f"Malformed XML: {exc}", offset=offset) from exc
    return _element_to_dict(root)


def _element_to_dict(element: ElementTree.Element) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for child in element:
        value: Any = _element_to_dict(child) if len(child) else (child.text or "").strip()
        if child.tag in result:
            existing = result[child.tag]
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[child.tag] = [existing, value]
        else:
            result[child.tag] = value
    return result
