"""HTTP API for the crawl engine."""
