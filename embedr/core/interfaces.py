from abc import ABC, abstractmethod

from embedr.core.entities import HttpResponse


class Transport(ABC):
    @abstractmethod
    def request(self, url: str) -> HttpResponse:
        """Perform one blocking GET and return the status code and raw body."""
        pass

    def close(self) -> None:
        """Release held connections. No-op unless the transport keeps any."""
        pass
