from typing import Any, Mapping, Sequence, Tuple
from urllib.parse import quote_plus

from embedr.core.entities import ProviderDescriptor

Params = Tuple[Tuple[str, str], ...]


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_params(params: Mapping[str, Any]) -> Params:
    """
    Turn extra request parameters into ordered (key, value) string pairs.

    Insertion order is kept so the same input always yields the same URL.
    """
    pairs = []
    for key, value in params.items():
        pairs.append((_stringify(key), _stringify(value)))
    return tuple(pairs)


def _escape(value: str) -> str:
    return quote_plus(value, safe="")


def build_request_url(
    provider: ProviderDescriptor,
    format_id: str,
    target_url: str,
    params: Sequence[Tuple[str, str]] = (),
) -> str:
    """
    Compose the discovery request URL for a target.

    Dot-format providers take the format as a path suffix
    (``endpoint.json?url=...``); the others take it as a ``format``
    query parameter.
    """
    if provider.dot_format:
        url = f"{provider.endpoint}.{format_id}?url={_escape(target_url)}"
    else:
        url = f"{provider.endpoint}?url={_escape(target_url)}&format={format_id}"

    for key, value in params:
        url += f"&{_escape(key)}={_escape(value)}"

    return url
