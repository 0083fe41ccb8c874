import logging
from types import MappingProxyType
from typing import List, Mapping, Optional

from embedr.core.entities import FormatDescriptor
from embedr.core.errors import CodecUnavailableError, UsageError
from embedr.formats.codecs import decode_json, decode_xml

logger = logging.getLogger(__name__)

JSON = FormatDescriptor(id="json", requires="json", decode=decode_json)
XML = FormatDescriptor(id="xml", requires="defusedxml", decode=decode_xml)

# Table order is the fallback order
FORMATS = MappingProxyType({
    JSON.id: JSON,
    XML.id: XML,
})

DEFAULT_FORMAT = JSON.id


def get_format(format_id: str) -> Optional[FormatDescriptor]:
    return FORMATS.get(format_id)


def resolve_format(
    requested: Optional[str] = None,
    formats: Optional[Mapping[str, FormatDescriptor]] = None,
    default: Optional[str] = None,
) -> FormatDescriptor:
    """
    Pick the codec used for a request.

    An explicitly requested format must be known and available; there is no
    fallback for it. Without a request the default codec is tried first, then
    every other codec in table order, probing each one once.

    Raises:
        UsageError: If the requested format is not known.
        CodecUnavailableError: If no candidate codec can be used.
    """
    formats = FORMATS if formats is None else formats
    default = DEFAULT_FORMAT if default is None else default

    if requested is not None:
        descriptor = formats.get(requested)
        if descriptor is None:
            raise UsageError(f"Requested format not supported: {requested}")
        if not descriptor.is_available():
            raise CodecUnavailableError(
                f"Please install '{descriptor.requires}' to use the {requested} format.",
                attempted=[requested],
            )
        return descriptor

    candidates: List[FormatDescriptor] = []
    if default in formats:
        candidates.append(formats[default])
    candidates.extend(d for fid, d in formats.items() if fid != default)

    attempted: List[str] = []
    for descriptor in candidates:
        attempted.append(descriptor.id)
        logger.debug(f"Probing codec {descriptor.id} (module {descriptor.requires})")
        if descriptor.is_available():
            if descriptor.id != default:
                logger.warning(
                    f"Default format {default} unavailable, falling back to {descriptor.id} "
                    f"(tried: {', '.join(attempted)})"
                )
            return descriptor

    raise CodecUnavailableError(
        f"Could not find any suitable library to parse responses with, tried: {', '.join(attempted)}",
        attempted=attempted,
    )
