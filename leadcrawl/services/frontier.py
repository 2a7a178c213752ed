"""Breadth-first URL frontier for a single seed's crawl."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from urllib.parse import urlparse


class Frontier:
    """FIFO queue of discovered URLs plus the set of URLs already visited.

    A URL is marked visited at the moment it is handed out, so it is never
    returned twice even if pages keep linking to it.

    Args:
        seed: First URL to visit
        same_domain: Only accept URLs whose host matches the seed's host

    Example:
        >>> frontier = Frontier("http://example.org")
        >>> frontier.next_url()
        'http://example.org'
        >>> frontier.extend(["http://example.org", "http://example.org/contact"])
        >>> frontier.next_url()
        'http://example.org/contact'
        >>> frontier.next_url() is None
        True
    """

    def __init__(self, seed: str, same_domain: bool = False) -> None:
        self.seed = seed
        self._seed_host = (urlparse(seed).hostname or "").lower()
        self._same_domain = same_domain
        self._queue: deque[str] = deque([seed])
        self._visited: set[str] = set()

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    @property
    def pending(self) -> int:
        """Number of queued entries, including ones already visited."""
        return len(self._queue)

    def accepts(self, url: str) -> bool:
        if not self._same_domain:
            return True
        try:
            host = (urlparse(url).hostname or "").lower()
        except ValueError:
            return False
        return host == self._seed_host

    def extend(self, urls: Iterable[str]) -> None:
        """Enqueue discovered URLs, skipping ones already visited."""
        for url in urls:
            if url not in self._visited and self.accepts(url):
                self._queue.append(url)

    def next_url(self) -> str | None:
        """Dequeue the next unvisited URL and mark it visited.

        Returns:
            The URL to process, or None when the queue is drained
        """
        while self._queue:
            url = self._queue.popleft()
            if url in self._visited:
                continue
            self._visited.add(url)
            return url
        return None
