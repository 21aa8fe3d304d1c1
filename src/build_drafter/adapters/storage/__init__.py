"""Draft persistence adapters."""

from build_drafter.adapters.storage.yaml_draft_store import YamlDraftStore

__all__ = ["YamlDraftStore"]
