import logging
from typing import Dict, Optional

import requests

from embedr.core.config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from embedr.core.entities import HttpResponse
from embedr.core.errors import NetworkError
from embedr.core.interfaces import Transport

logger = logging.getLogger(__name__)


class HttpTransport(Transport):
    """
    requests-based transport.

    Redirects are followed; the status code of the final response is returned
    as-is, errors included. Only connection-level failures raise.
    """

    def __init__(
        self,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "application/json, text/xml;q=0.9, */*;q=0.5",
        })
        if headers:
            self.session.headers.update(headers)

    def request(self, url: str) -> HttpResponse:
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.Timeout as e:
            raise NetworkError(f"Timed out after {self.timeout}s requesting {url}") from e
        except requests.RequestException as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

        logger.debug(f"GET {url} -> {resp.status_code} ({len(resp.content)} bytes)")
        return HttpResponse(status_code=resp.status_code, body=resp.content)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
