import logging
from urllib.parse import urlsplit

from ga4audit.domain.crawl_settings import CrawlSettings
from ga4audit.domain.crawl_state import CrawlState
from ga4audit.services.url_normalizer import is_same_site, looks_like_homepage, resolve_link

logger = logging.getLogger(__name__)


class CrawlPolicy:
    """Crawl decision rules: which links to follow, when to stop discovering
    and when to fall back to well-known paths.

    Separates policy decisions from crawl orchestration logic.
    """

    def __init__(self, settings: CrawlSettings):
        self.settings = settings

    def is_asset(self, url: str) -> bool:
        path = urlsplit(url).path.lower()
        return path.endswith(tuple(self.settings.asset_extensions))

    def should_follow(self, url: str, state: CrawlState) -> bool:
        if not is_same_site(url, state.hostname):
            return False
        if self.is_asset(url):
            logger.debug("Skipping (asset) %s", url)
            return False
        return True

    def discovery_open(self, state: CrawlState) -> bool:
        """False once the queue reached its soft cap; already queued URLs still get crawled."""
        return len(state.queue) < self.settings.queue_soft_cap

    def should_seed_common_paths(self, state: CrawlState) -> bool:
        return looks_like_homepage(state.start_url)

    def needs_fallback(self, pages_analyzed: int, new_links: int) -> bool:
        return pages_analyzed <= self.settings.fallback_page_window and new_links < self.settings.fallback_link_threshold

    def common_path_urls(self, state: CrawlState) -> list:
        urls = []
        for path in self.settings.common_paths:
            url = resolve_link(path, state.start_url)
            if url is not None:
                urls.append(url)
        return urls
