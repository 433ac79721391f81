import re
from typing import Callable, Iterable, List, Optional

from bs4 import BeautifulSoup

from ga4audit.domain.page_result import (
    DETECTION_DIRECT,
    DETECTION_INFERRED,
    DETECTION_NONE,
    TagSignals,
)

GTM_ID_RE = re.compile(r"GTM-[A-Z0-9]+")
GTAG_CONFIG_RE = re.compile(r"""gtag\(\s*['"]config['"]\s*,\s*['"](G-[A-Z0-9]+)['"]""")
SRC_ID_RE = re.compile(r"[?&]id=((?:GTM|G)-[A-Z0-9]+)")

CONFIDENCE_DIRECT = 1.0
CONFIDENCE_GTM_DATALAYER = 0.6
CONFIDENCE_HOST_MARKERS = 0.3


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


class TagDetector:
    """Find GTM containers and GA4 measurement IDs in an HTML document."""

    def __init__(self, soup_factory: Optional[Callable[[str], BeautifulSoup]] = None):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def parse(self, html: str) -> BeautifulSoup:
        return self._soup_factory(html or "")

    def detect(self, html: str, soup: Optional[BeautifulSoup] = None) -> TagSignals:
        html = html or ""
        if soup is None:
            soup = self.parse(html)

        gtm_from_src: List[str] = []
        ga4_from_src: List[str] = []
        for script in soup.find_all("script", src=True):
            src = script.get("src") or ""
            if "googletagmanager.com" not in src:
                continue
            for tag_id in SRC_ID_RE.findall(src):
                if tag_id.startswith("GTM-"):
                    gtm_from_src.append(tag_id)
                else:
                    ga4_from_src.append(tag_id)

        gtm_containers = _unique(gtm_from_src + GTM_ID_RE.findall(html))
        ga4_properties = _unique(GTAG_CONFIG_RE.findall(html) + ga4_from_src)

        has_data_layer = "dataLayer" in html
        references_ga = "google-analytics.com" in html
        references_gtm = "googletagmanager.com" in html

        if ga4_properties:
            detection, confidence = DETECTION_DIRECT, CONFIDENCE_DIRECT
        elif gtm_containers and has_data_layer:
            # GTM usually injects the GA4 config tag at runtime
            detection, confidence = DETECTION_INFERRED, CONFIDENCE_GTM_DATALAYER
        elif references_ga or (references_gtm and has_data_layer):
            detection, confidence = DETECTION_INFERRED, CONFIDENCE_HOST_MARKERS
        else:
            detection, confidence = DETECTION_NONE, 0.0

        return TagSignals(
            gtm_containers=tuple(gtm_containers),
            ga4_properties=tuple(ga4_properties),
            has_data_layer=has_data_layer,
            references_google_analytics=references_ga,
            references_tag_manager=references_gtm,
            ga4_detection=detection,
            ga4_confidence=confidence,
        )
