from typing import Set


class VisitedTracker:
    """
    Tracks which normalized URLs have been fetched during one crawl.

    Kept apart from the crawl queue so the "never fetch twice" rule lives in
    one place and can be tested on its own.
    """

    def __init__(self):
        self._visited: Set[str] = set()

    def mark(self, url: str) -> None:
        """Mark a URL as visited."""
        self._visited.add(url)

    def is_visited(self, url: str) -> bool:
        """Check if a URL has been visited."""
        return url in self._visited
