import logging
import re
from typing import Callable, List, Optional

from bs4 import BeautifulSoup

from ga4audit.services.url_normalizer import resolve_link

logger = logging.getLogger(__name__)

# markup that html.parser drops (broken attributes, script-built menus)
_HREF_DOUBLE_RE = re.compile(r'href="([^"]*)"', re.IGNORECASE)
_HREF_SINGLE_RE = re.compile(r"href='([^']*)'", re.IGNORECASE)


class LinkExtractor:
    def __init__(self, parser_fn: Optional[Callable[[str], BeautifulSoup]] = None):
        self._parser_fn = parser_fn or (lambda html: BeautifulSoup(html, "html.parser"))

    def raw_hrefs(self, html: str, soup: Optional[BeautifulSoup] = None) -> List[str]:
        """Every href value in document order, anchors first then regex fallbacks."""
        if soup is None:
            soup = self._parser_fn(html or "")
        hrefs = [el.get("href") for el in soup.find_all(["a", "area"], href=True)]
        hrefs.extend(_HREF_DOUBLE_RE.findall(html or ""))
        hrefs.extend(_HREF_SINGLE_RE.findall(html or ""))
        return hrefs

    def extract_links(self, base_url: str, html: str, soup: Optional[BeautifulSoup] = None) -> List[str]:
        """Absolute, normalized, de-duplicated links found on the page.

        Host and asset filtering is left to the crawl policy.
        """
        seen = set()
        urls = []
        for href in self.raw_hrefs(html, soup):
            url = resolve_link(href, base_url)
            if url is None or url in seen:
                continue
            seen.add(url)
            urls.append(url)
        logger.debug("Extracted %d links from %s", len(urls), base_url)
        return urls
