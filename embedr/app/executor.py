import logging
from typing import Any, Dict, Optional
from xml.etree.ElementTree import ParseError

from embedr.core.entities import FormatDescriptor, RequestSpec
from embedr.core.errors import (
    HTTPStatusError,
    MalformedResponseError,
    NotFoundError,
    UnsupportedError,
)
from embedr.core.interfaces import Transport

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_EMBED_DISABLED = 401
STATUS_NOT_FOUND = 404
STATUS_FORMAT_NOT_IMPLEMENTED = 501


def execute(transport: Transport, spec: RequestSpec) -> Optional[bytes]:
    """
    Perform the discovery request for a resolved spec.

    Returns:
        The response body, or None if the provider declined to embed (401).

    Raises:
        NotFoundError: On 404.
        UnsupportedError: On 501, the provider does not serve this format.
        HTTPStatusError: On any other non-200 status.
        NetworkError: If the transport itself failed.
    """
    response = transport.request(spec.request_url)
    status = response.status_code

    if status == STATUS_OK:
        return response.body
    if status == STATUS_EMBED_DISABLED:
        logger.warning(f"Embedding disabled by {spec.domain} for {spec.url}")
        return None
    if status == STATUS_NOT_FOUND:
        raise NotFoundError(f"{spec.url} not found", url=spec.url)
    if status == STATUS_FORMAT_NOT_IMPLEMENTED:
        raise UnsupportedError(f"{spec.format.id} not supported by {spec.domain}")

    raise HTTPStatusError(
        f"Unexpected HTTP {status} from {spec.domain} for {spec.url}",
        status_code=status,
        request_url=spec.request_url,
    )


def parse_response(body: bytes, fmt: FormatDescriptor) -> Dict[str, Any]:
    """Decode a 200 body with the codec chosen at construction."""
    try:
        return fmt.decode(body)
    except (ValueError, TypeError, ParseError) as e:
        # JSONDecodeError and defusedxml refusals are ValueErrors
        raise MalformedResponseError(f"Could not decode {fmt.id} response: {e}") from e
