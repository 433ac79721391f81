from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ga4audit.services.fetcher import Fetcher, RenderingProxyFetcher

logger = logging.getLogger(__name__)


def make_proxy_fetcher(http_service, api_url: str, api_key: Optional[str]) -> Optional[RenderingProxyFetcher]:
    """Return a rendering-proxy fetcher, or None when no API key is configured."""
    if not api_key:
        logger.info("RENDER_API_KEY not set; pages will be fetched directly without JS rendering")
        return None
    return RenderingProxyFetcher(http_service, api_url=api_url, api_key=api_key)


@dataclass(frozen=True)
class FetcherFactory:
    http_fetcher: Fetcher
    proxy_fetcher: Optional[Fetcher] = None

    def default(self) -> Fetcher:
        """Prefer rendered HTML; fall back to plain HTTP without a proxy key."""
        if self.proxy_fetcher is not None:
            return self.proxy_fetcher
        return self.http_fetcher
