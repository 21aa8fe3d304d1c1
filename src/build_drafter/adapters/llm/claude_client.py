"""Claude API client for the completion service."""

import logging

import httpx

from build_drafter.config import Settings
from build_drafter.core import CompletionClient, CompletionError

logger = logging.getLogger(__name__)

JSON_ONLY_INSTRUCTION = "Respond with a single valid JSON object and nothing else."


class ClaudeClient(CompletionClient):
    """Claude Messages API implementation.

    One request per call: no retries and no streaming. Callers decide what a
    failure means.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.api_key = settings.anthropic_api_key
        self.model = settings.claude.model
        self.max_tokens = settings.claude.max_tokens
        self.temperature = settings.claude.temperature
        self.timeout = settings.claude.timeout
        self.base_url = "https://api.anthropic.com/v1"

    async def complete(self, prompt: str, system: str, json_mode: bool = False) -> str:
        """Send prompt and return the generated text."""
        if not self.api_key:
            raise CompletionError("ANTHROPIC_API_KEY is not set")

        messages = [{"role": "user", "content": prompt}]
        if json_mode:
            system = f"{system}\n\n{JSON_ONLY_INSTRUCTION}" if system else JSON_ONLY_INSTRUCTION
            # Prefill the reply so the model starts inside the object
            messages.append({"role": "assistant", "content": "{"})

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/messages",
                    headers={
                        "x-api-key": self.api_key,
                        "anthropic-version": "2023-06-01",
                        "content-type": "application/json",
                    },
                    json={
                        "model": self.model,
                        "max_tokens": self.max_tokens,
                        "temperature": self.temperature,
                        "system": system,
                        "messages": messages,
                    },
                )
        except httpx.RequestError as e:
            raise CompletionError(f"Network error calling Claude: {e}") from e

        if response.status_code != 200:
            raise CompletionError(f"Claude API returned HTTP {response.status_code}")

        text = self._response_text(response)
        if json_mode and not text.lstrip().startswith("{"):
            text = "{" + text
        return text

    def _response_text(self, response: httpx.Response) -> str:
        """Pull the first text block out of a Messages API response."""
        try:
            data = response.json()
        except ValueError as e:
            raise CompletionError("Claude API returned a non-JSON body") from e

        blocks = data.get("content") if isinstance(data, dict) else None
        for block in blocks or []:
            if isinstance(block, dict) and block.get("type", "text") == "text" and block.get("text"):
                return block["text"]

        logger.debug("Claude response without text content: %s", str(data)[:200])
        raise CompletionError("Claude API returned no message text")
