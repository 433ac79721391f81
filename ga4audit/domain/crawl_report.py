"""Site-wide crawl report data model."""
from dataclasses import dataclass, field
from typing import List, NamedTuple

from ga4audit.domain.page_result import PageResult


class CrawlSummary(NamedTuple):
    """Aggregate counters for one crawl."""
    total_pages_discovered: int
    """URLs visited plus URLs still queued"""

    pages_analyzed: int
    """Pages fetched, successfully or not; always successful + errors"""

    successful_analysis: int
    pages_with_errors: int
    pages_with_gtm: int
    pages_with_ga4: int

    tag_coverage: int
    """Integer percent of successful pages carrying GTM or GA4"""

    coverage_status: str
    is_complete: bool
    """True when the queue was exhausted before the page budget ran out"""

    estimated_pages_remaining: int

    def to_dict(self) -> dict:
        return {
            "totalPagesDiscovered": self.total_pages_discovered,
            "pagesAnalyzed": self.pages_analyzed,
            "successfulAnalysis": self.successful_analysis,
            "pagesWithErrors": self.pages_with_errors,
            "pagesWithGTM": self.pages_with_gtm,
            "pagesWithGA4": self.pages_with_ga4,
            "tagCoverage": self.tag_coverage,
            "coverageStatus": self.coverage_status,
            "isComplete": self.is_complete,
            "estimatedPagesRemaining": self.estimated_pages_remaining,
        }


@dataclass
class CrawlReport:
    summary: CrawlSummary
    page_details: List[PageResult] = field(default_factory=list)
    error_pages: List[PageResult] = field(default_factory=list)
    untagged_pages: List[PageResult] = field(default_factory=list)
    insights: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "crawlSummary": self.summary.to_dict(),
            "pageDetails": [p.to_dict() for p in self.page_details],
            "errorPages": [p.to_dict() for p in self.error_pages],
            "untaggedPages": [p.to_dict() for p in self.untagged_pages],
            "insights": list(self.insights),
            "recommendations": list(self.recommendations),
            "nextSteps": list(self.next_steps),
        }
