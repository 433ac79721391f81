import logging
from typing import Optional

from ga4audit.domain import CrawlReport, CrawlSettings, CrawlState, PageResult
from ga4audit.domain.http_response import HttpResponse
from ga4audit.exceptions import HttpFetchError
from ga4audit.services.url_normalizer import hostname_of, normalize_url

logger = logging.getLogger(__name__)


class CrawlExecutor:
    """Breadth-first, same-site crawl of one website.

    This class owns the crawl control-flow (queue traversal, fetch, tag
    detection, link discovery). It does NOT construct dependencies; that
    stays in the DI layer. All crawl state lives in a CrawlState created per
    call, so one executor can serve many requests.
    """

    def __init__(
        self,
        *,
        fetcher_factory,
        tag_detector,
        link_extractor,
        crawl_policy,
        report_builder,
        settings: CrawlSettings,
    ):
        self.fetcher_factory = fetcher_factory
        self.tag_detector = tag_detector
        self.link_extractor = link_extractor
        self.crawl_policy = crawl_policy
        self.report_builder = report_builder
        self.settings = settings

    def crawl(self, start_url: str, max_pages: Optional[int] = None) -> CrawlReport:
        url = normalize_url(start_url)
        budget = self.settings.clamp_max_pages(max_pages)
        state = CrawlState(url, hostname_of(url))
        state.enqueue(url)
        if self.crawl_policy.should_seed_common_paths(state):
            state.enqueue_all(self.crawl_policy.common_path_urls(state))

        fetcher = self.fetcher_factory.default()
        logger.info("Crawling %s (budget %s pages, via %s)", url, budget, fetcher.method)

        while state.analyzed_count < budget:
            next_url = state.pop_next()
            if next_url is None:
                break
            state.mark_visited(next_url)
            self.crawl_page(next_url, state, fetcher)

        report = self.report_builder.build(state)
        logger.info(
            "Crawl of %s finished: %s analyzed, %s errors, coverage %s%%",
            url,
            report.summary.pages_analyzed,
            report.summary.pages_with_errors,
            report.summary.tag_coverage,
        )
        return report

    def crawl_page(self, url: str, state: CrawlState, fetcher) -> PageResult:
        """Fetch and analyze one page, recording the result in `state`.

        Failures are recorded as error results and never raised.
        """
        try:
            response: HttpResponse = fetcher.fetch(url)
        except HttpFetchError as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            return self._record(state, PageResult.failure(url, str(e)))
        except Exception as e:
            logger.error("Fetch error for %s: %s", url, e, exc_info=True)
            return self._record(state, PageResult.failure(url, str(e) or type(e).__name__))

        if not response.ok:
            logger.warning("Non-success status for %s: %s", url, response.status_code)
            return self._record(
                state,
                PageResult.failure(url, f"HTTP {response.status_code}", response.elapsed_ms),
            )

        try:
            soup = self.tag_detector.parse(response.text)
            signals = self.tag_detector.detect(response.text, soup)
            links = self.link_extractor.extract_links(url, response.text, soup)
        except Exception as e:
            logger.error("Analysis error for %s: %s", url, e, exc_info=True)
            return self._record(state, PageResult.failure(url, f"Analysis failed: {e}", response.elapsed_ms))

        page = self._record(state, PageResult.success(url, signals, response.elapsed_ms))
        logger.info(
            "Fetched %s -> status %s, gtm=%s ga4=%s",
            url, response.status_code, page.gtm_found, signals.ga4_detection,
        )
        added = self.enqueue_links(links, state)
        if self.crawl_policy.needs_fallback(state.analyzed_count, added):
            fallback = state.enqueue_all(self.crawl_policy.common_path_urls(state))
            if fallback:
                logger.debug("Few links on %s; queued %d common paths", url, fallback)
        return page

    def enqueue_links(self, links, state: CrawlState) -> int:
        added = 0
        for link in links:
            if added >= self.settings.max_links_per_page:
                break
            if not self.crawl_policy.discovery_open(state):
                logger.debug("Queue soft cap reached; discovery stopped")
                break
            if link in state.discovered or not self.crawl_policy.should_follow(link, state):
                continue
            if state.enqueue(link):
                added += 1
        return added

    def _record(self, state: CrawlState, page: PageResult) -> PageResult:
        state.record(page)
        return page
