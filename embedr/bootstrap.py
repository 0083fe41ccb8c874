from typing import Any, Dict, Optional

from embedr.core.config import Settings, load_settings, read_settings
from embedr.formats.registry import FORMATS
from embedr.infra.network.http import HttpTransport
from embedr.providers.registry import default_registry


def create_transport(settings: Optional[Settings] = None) -> HttpTransport:
    """Build the default HTTP transport; without settings, read EMBEDR_* from the environment."""
    settings = settings or read_settings()
    return HttpTransport(timeout=settings.timeout, user_agent=settings.user_agent)


def create_container(settings: Optional[Settings] = None) -> Dict[str, Any]:
    # The CLI entry point; the only place a .env file is loaded
    settings = settings or load_settings()
    return {
        "settings": settings,
        "transport": create_transport(settings),
        "registry": default_registry,
        "formats": FORMATS,
    }
