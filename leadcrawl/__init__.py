"""Contact discovery crawler: emails and company LinkedIn pages from a seed URL."""

__version__ = "0.1.0"
