"""HTTP link fetcher."""

import httpx

from build_drafter.config import Settings
from build_drafter.core import FetchedPage, FetchError, PageFetcher


class HttpPageFetcher(PageFetcher):
    """Fetch links with httpx, one short-lived client per request."""

    def __init__(self, settings: Settings) -> None:
        self.timeout = settings.extraction.fetch_timeout
        self.user_agent = settings.extraction.user_agent

    async def fetch(self, url: str) -> FetchedPage:
        """GET the URL, following redirects."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/json,text/plain;q=0.9,*/*;q=0.5",
                },
            ) as client:
                response = await client.get(url)
        except httpx.InvalidURL as e:
            raise FetchError(f"invalid URL: {e}") from e
        except httpx.RequestError as e:
            raise FetchError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            raise FetchError(f"HTTP {response.status_code}", status_code=response.status_code)

        return FetchedPage(
            url=str(response.url),
            status_code=response.status_code,
            content_type=response.headers.get("content-type", ""),
            text=response.text,
        )
