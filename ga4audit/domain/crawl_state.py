from collections import deque
from typing import Deque, Iterable, List, Optional, Set

from ga4audit.domain.page_result import PageResult
from ga4audit.domain.visited_tracker import VisitedTracker


class CrawlState:
    """Per-invocation crawl bookkeeping: BFS queue, visited set and results.

    `discovered` holds every URL ever queued or visited so a URL is enqueued
    at most once; `visited` guards against fetching twice.
    """

    def __init__(self, start_url: str, hostname: str, visited_tracker: Optional[VisitedTracker] = None):
        self.start_url = start_url
        self.hostname = hostname
        self.visited = visited_tracker or VisitedTracker()
        self.queue: Deque[str] = deque()
        self.discovered: Set[str] = set()
        self.pages: List[PageResult] = []

    def enqueue(self, url: str) -> bool:
        if url in self.discovered:
            return False
        self.discovered.add(url)
        self.queue.append(url)
        return True

    def enqueue_all(self, urls: Iterable[str]) -> int:
        return sum(1 for u in urls if self.enqueue(u))

    def pop_next(self) -> Optional[str]:
        """Pop queued URLs until one that has not been visited turns up."""
        while self.queue:
            url = self.queue.popleft()
            if self.visited.is_visited(url):
                continue
            return url
        return None

    def mark_visited(self, url: str) -> None:
        self.discovered.add(url)
        self.visited.mark(url)

    def record(self, page: PageResult) -> None:
        self.pages.append(page)

    @property
    def analyzed_count(self) -> int:
        return len(self.pages)

    @property
    def pending_count(self) -> int:
        return sum(1 for u in self.queue if not self.visited.is_visited(u))
