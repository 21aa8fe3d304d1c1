"""Completion service adapters."""

from build_drafter.adapters.llm.claude_client import ClaudeClient

__all__ = ["ClaudeClient"]
