"""
OEmbed client.

Usage:

    try:
        client = OEmbed("http://vimeo.com/6382511", maxwidth=600)
        data = client.fetch()
    except UnsupportedError:
        # URL not supported, move on
        ...

Construction validates the target, picks a codec and builds the request URL
without touching the network. fetch() performs the request.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from embedr.app.executor import execute, parse_response
from embedr.app.request_builder import build_request_url, normalize_params
from embedr.core.entities import ClientState, RequestSpec
from embedr.core.errors import UsageError
from embedr.core.interfaces import Transport
from embedr.formats.registry import resolve_format
from embedr.providers.registry import ProviderRegistry, default_registry

logger = logging.getLogger(__name__)


class OEmbed:
    """
    One-shot OEmbed request for a single target URL.

    Args:
        url: The page to embed. Must be an http or https URL.
        providers: Domain to provider mapping replacing the default registry.
            Values are ProviderDescriptor objects or dicts with
            ``endpoint`` (or ``base``) and ``dot_format`` keys.
        format: Codec id to request (``json`` or ``xml``). When omitted the
            first available codec is used, json first.
        transport: Object with a ``request(url)`` method. Defaults to an
            HttpTransport built from EMBEDR_* environment variables,
            created for each fetch and closed afterwards.
        **params: Passed through as extra query parameters, e.g. maxwidth.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        providers: Optional[Mapping[str, Any]] = None,
        format: Optional[str] = None,
        transport: Optional[Transport] = None,
        **params: Any,
    ):
        if not url:
            raise UsageError("No url provided")

        registry = default_registry if providers is None else ProviderRegistry(providers)
        domain, provider = registry.resolve(url)
        fmt = resolve_format(format)
        extra = normalize_params(params)

        self._spec = RequestSpec(
            url=url,
            domain=domain,
            provider=provider,
            format=fmt,
            params=extra,
            request_url=build_request_url(provider, fmt.id, url, extra),
        )
        self._transport = transport
        self._state = ClientState.CONSTRUCTED
        self._data: Optional[Dict[str, Any]] = {}
        logger.debug(f"Built request URL {self._spec.request_url}")

    @property
    def spec(self) -> RequestSpec:
        return self._spec

    @property
    def url(self) -> str:
        return self._spec.url

    @property
    def domain(self) -> str:
        return self._spec.domain

    @property
    def format(self) -> str:
        return self._spec.format.id

    @property
    def request_url(self) -> str:
        return self._spec.request_url

    @property
    def params(self) -> Dict[str, str]:
        return dict(self._spec.params)

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def data(self) -> Optional[Dict[str, Any]]:
        """Result of the last successful fetch; None if embedding was disabled."""
        return self._data

    def fetch(self) -> Optional[Dict[str, Any]]:
        """
        Request the embed data.

        Every call performs a new request; nothing is cached.

        Returns:
            The decoded payload, or None if the provider disabled embedding.

        Raises:
            NotFoundError: The provider does not know the target.
            UnsupportedError: The provider does not serve the chosen format.
            MalformedResponseError: The response body could not be decoded.
            NetworkError: The request failed or returned an unexpected status.
        """
        logger.info(f"Fetching embed data for {self._spec.url} from {self._spec.domain}")
        transport = self._transport
        owned = transport is None
        if owned:
            # Default transport lives for this fetch only
            from embedr.bootstrap import create_transport
            transport = create_transport()
        try:
            body = execute(transport, self._spec)
            result = None if body is None else parse_response(body, self._spec.format)
        except Exception:
            self._state = ClientState.FAILED
            raise
        finally:
            if owned:
                transport.close()

        if result is None:
            logger.info(f"Fetch finished for {self._spec.url}: embedding disabled")
        else:
            logger.info(f"Fetch finished for {self._spec.url}: {len(result)} fields")
        self._data = result
        self._state = ClientState.FETCHED
        return result

    # Alias for fetch()
    gets = fetch

    def __repr__(self) -> str:
        return f"OEmbed(url={self._spec.url!r}, format={self.format!r}, state={self._state.value})"
