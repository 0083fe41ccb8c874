import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Tuple

from embedr.core.entities import ProviderDescriptor
from embedr.core.errors import UnsupportedError

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http:", "https:")

DEFAULT_PROVIDERS = MappingProxyType({
    "youtube.com":   ProviderDescriptor("http://www.youtube.com/oembed", dot_format=False),
    "vimeo.com":     ProviderDescriptor("http://vimeo.com/api/oembed", dot_format=True),
    "flickr.com":    ProviderDescriptor("http://www.flickr.com/services/oembed", dot_format=False),
    "qik.com":       ProviderDescriptor("http://qik.com/api/oembed", dot_format=True),
    "revision3.com": ProviderDescriptor("http://revision3.com/api/oembed", dot_format=False),
    "viddler.com":   ProviderDescriptor("http://lab.viddler.com/services/oembed", dot_format=False),
    "hulu.com":      ProviderDescriptor("http://www.hulu.com/api/oembed", dot_format=True),
})


def normalize_host(host: str) -> str:
    """Lowercase a host and drop a leading "www."."""
    host = host.lower()
    if host.startswith("www."):
        host = host[len("www."):]
    return host


def normalize_domain(url: str) -> str:
    """
    Extract the registry key for a target URL.

    The URL is split on "/"; the first piece must be exactly "http:" or
    "https:" and the host is the third piece, lowercased with a leading
    "www." removed.

    Raises:
        UnsupportedError: If the URL is not an http(s) URL.
    """
    parts = url.split("/")
    if len(parts) < 3 or parts[0] not in SUPPORTED_SCHEMES:
        raise UnsupportedError(f"Unsupported protocol: {url}")

    return normalize_host(parts[2])


class ProviderRegistry:
    """
    Read-only mapping of normalized domains to provider descriptors.
    """

    def __init__(self, providers: Optional[Mapping[str, Any]] = None):
        if providers is None:
            self._providers = DEFAULT_PROVIDERS
        else:
            # A custom set replaces the defaults entirely
            self._providers = MappingProxyType({
                normalize_host(str(domain)): ProviderDescriptor.coerce(entry)
                for domain, entry in providers.items()
            })

    def __contains__(self, domain: str) -> bool:
        return domain in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def items(self):
        return self._providers.items()

    def get(self, domain: str) -> Optional[ProviderDescriptor]:
        return self._providers.get(domain)

    def lookup(self, url: str) -> Optional[ProviderDescriptor]:
        """
        Find the provider serving the given URL.

        Returns:
            The descriptor, or None if no provider matches.

        Raises:
            UnsupportedError: If the URL is not an http(s) URL.
        """
        return self._providers.get(normalize_domain(url))

    def resolve(self, url: str) -> Tuple[str, ProviderDescriptor]:
        """Like lookup(), but raises UnsupportedError when nothing matches."""
        domain = normalize_domain(url)
        provider = self._providers.get(domain)
        if provider is None:
            raise UnsupportedError(f"Unsupported provider: {domain}")
        logger.debug(f"Matched {domain} to {provider.endpoint}")
        return domain, provider


default_registry = ProviderRegistry()
