"""Link fetch adapters."""

from build_drafter.adapters.fetch.http_fetcher import HttpPageFetcher

__all__ = ["HttpPageFetcher"]
