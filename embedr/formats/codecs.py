"""
Response codecs.

Each codec turns a raw response body into a plain dict. Backing libraries are
imported inside the decode function so that a missing optional library only
matters for the codec that needs it.
"""

import json
from typing import Any, Dict


def decode_json(data: bytes) -> Dict[str, Any]:
    payload = json.loads(data)
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def _element_to_value(element):
    children = list(element)
    if not children:
        text = (element.text or "").strip()
        return text or None

    result: Dict[str, Any] = {}
    for child in children:
        value = _element_to_value(child)
        if child.tag in result:
            # Repeated tags collapse into a list
            existing = result[child.tag]
            if not isinstance(existing, list):
                result[child.tag] = [existing]
            result[child.tag].append(value)
        else:
            result[child.tag] = value
    return result


def decode_xml(data: bytes) -> Dict[str, Any]:
    """
    Decode an XML document into a dict keyed by the root's child tags.

    The root element itself (``<oembed>``) is dropped. Leaf elements map to
    their stripped text, or None when empty.
    """
    from defusedxml import ElementTree

    root = ElementTree.fromstring(data)
    value = _element_to_value(root)
    if not isinstance(value, dict):
        raise ValueError("Expected an XML element with child elements")
    return value
