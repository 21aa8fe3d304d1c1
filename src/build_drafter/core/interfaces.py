"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from build_drafter.core.entities import DraftRecord


@dataclass
class FetchedPage:
    """Raw response of a link fetch."""

    url: str
    status_code: int
    content_type: str
    text: str


class CompletionClient(ABC):
    """Interface for the text-completion service."""

    @abstractmethod
    async def complete(self, prompt: str, system: str, json_mode: bool = False) -> str:
        """Send one prompt and return the generated text.

        Raises CompletionError when the service fails or returns nothing.
        """
        pass


class PageFetcher(ABC):
    """Interface for fetching links."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchedPage:
        """Fetch the URL. Raises FetchError on transport or status failure."""
        pass


class DraftStore(ABC):
    """Key-value persistence for saved drafts."""

    @abstractmethod
    def insert(self, owner_id: str, draft: DraftRecord) -> str:
        """Store a new draft and return its id."""
        pass

    @abstractmethod
    def update(self, draft_id: str, draft: DraftRecord) -> None:
        """Replace an existing draft. Raises KeyError if unknown."""
        pass

    @abstractmethod
    def get(self, draft_id: str) -> Optional[DraftRecord]:
        """Return the draft or None."""
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[tuple[str, DraftRecord]]:
        """Return (id, draft) pairs for one owner, newest first."""
        pass

    @abstractmethod
    def delete(self, draft_id: str) -> bool:
        """Delete a draft. Returns False if it did not exist."""
        pass


class DraftRenderer(ABC):
    """Interface for rendering a draft for display."""

    @abstractmethod
    def render(self, draft: DraftRecord, advisory: Optional[str] = None) -> str:
        """Render draft (and advisory, if any) as text."""
        pass
