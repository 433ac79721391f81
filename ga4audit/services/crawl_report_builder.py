from typing import List, Optional

from ga4audit.domain.crawl_report import CrawlReport, CrawlSummary
from ga4audit.domain.crawl_state import CrawlState
from ga4audit.domain.page_result import DETECTION_INFERRED


def coverage_percent(pages_with_gtm: int, pages_with_ga4: int, successful: int) -> int:
    if successful <= 0:
        return 0
    return round(max(pages_with_gtm, pages_with_ga4) * 100 / successful)


def coverage_status(coverage: int) -> str:
    if coverage >= 95:
        return "Excellent"
    if coverage >= 80:
        return "Good"
    if coverage >= 50:
        return "Fair"
    return "Poor"


class CrawlReportBuilder:
    """Turn a finished CrawlState into the crawl summary and its advice."""

    def __init__(self, untagged_page_limit: int = 20):
        self.untagged_page_limit = untagged_page_limit

    def build(self, state: CrawlState, is_complete: Optional[bool] = None) -> CrawlReport:
        pages = list(state.pages)
        successful = [p for p in pages if p.ok]
        errors = [p for p in pages if not p.ok]
        with_gtm = sum(1 for p in successful if p.gtm_found)
        with_ga4 = sum(1 for p in successful if p.ga4_found)
        untagged = [p for p in successful if not p.gtm_found and not p.ga4_found]
        coverage = coverage_percent(with_gtm, with_ga4, len(successful))
        remaining = state.pending_count
        if is_complete is None:
            is_complete = remaining == 0

        summary = CrawlSummary(
            total_pages_discovered=len(pages) + remaining,
            pages_analyzed=len(pages),
            successful_analysis=len(successful),
            pages_with_errors=len(errors),
            pages_with_gtm=with_gtm,
            pages_with_ga4=with_ga4,
            tag_coverage=coverage,
            coverage_status=coverage_status(coverage),
            is_complete=is_complete,
            estimated_pages_remaining=remaining,
        )
        return CrawlReport(
            summary=summary,
            page_details=pages,
            error_pages=errors,
            untagged_pages=untagged[: self.untagged_page_limit],
            insights=self._insights(summary, successful),
            recommendations=self._recommendations(summary, untagged),
            next_steps=self._next_steps(summary),
        )

    def _insights(self, summary: CrawlSummary, successful) -> List[str]:
        insights = []
        if summary.successful_analysis == 0:
            insights.append("No pages could be analyzed; the site may block automated requests.")
            return insights

        insights.append(
            f"Tag coverage is {summary.tag_coverage}% ({summary.coverage_status}) across "
            f"{summary.successful_analysis} successfully analyzed pages."
        )
        containers = sorted({c for p in successful for c in p.signals.gtm_containers})
        if containers:
            insights.append(f"GTM containers found: {', '.join(containers)}.")
        if len(containers) > 1:
            insights.append("Multiple GTM containers are deployed; check they do not fire duplicate GA4 tags.")
        measurement_ids = sorted({m for p in successful for m in p.signals.ga4_properties})
        if measurement_ids:
            insights.append(f"GA4 measurement IDs found: {', '.join(measurement_ids)}.")
        if len(measurement_ids) > 1:
            insights.append("More than one GA4 measurement ID is in use; traffic may be split across properties.")
        inferred = sum(1 for p in successful if p.signals.ga4_detection == DETECTION_INFERRED)
        if inferred:
            insights.append(
                f"GA4 was inferred, not directly observed, on {inferred} page(s); it is likely loaded through GTM."
            )
        if summary.pages_with_errors:
            insights.append(f"{summary.pages_with_errors} page(s) could not be fetched.")
        return insights

    def _recommendations(self, summary: CrawlSummary, untagged) -> List[str]:
        recs = []
        if summary.successful_analysis == 0:
            recs.append("Verify the URL is reachable and retry the crawl.")
            return recs
        if summary.pages_with_gtm == 0 and summary.pages_with_ga4 == 0:
            recs.append("Install Google Tag Manager and a GA4 configuration tag on every page.")
        elif untagged:
            recs.append(
                f"Add tracking to the {len(untagged)} untagged page(s); they are invisible in GA4 reports."
            )
        if summary.pages_with_gtm and summary.pages_with_gtm < summary.successful_analysis:
            recs.append("Deploy the GTM container in the shared site template so every page loads it.")
        if summary.pages_with_ga4 < summary.pages_with_gtm:
            recs.append("Confirm the GA4 configuration tag fires on all pages in GTM preview mode.")
        if summary.pages_with_errors:
            recs.append("Fix or redirect the pages that returned errors.")
        if not recs:
            recs.append("Tracking is consistent across the analyzed pages; keep monitoring after site releases.")
        return recs

    def _next_steps(self, summary: CrawlSummary) -> List[str]:
        steps = []
        if not summary.is_complete:
            steps.append(
                f"About {summary.estimated_pages_remaining} more page(s) were discovered; "
                "raise maxPages to analyze them."
            )
        steps.append("Use GTM preview mode to confirm tags fire on the untagged pages.")
        steps.append("Check GA4 DebugView for incoming page_view events.")
        steps.append("Run a GA4 property audit to review the configuration behind the tags.")
        return steps
