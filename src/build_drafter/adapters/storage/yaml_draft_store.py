"""Draft store keeping one YAML artifact per saved draft."""

import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import yaml

from build_drafter.core import DraftRecord, DraftStore


class YamlDraftStore(DraftStore):
    """Store drafts as YAML files under `<root>/<owner>/<id>.yaml`."""

    def __init__(self, storage_dir: Path) -> None:
        self.storage_dir = storage_dir
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def insert(self, owner_id: str, draft: DraftRecord) -> str:
        """Save draft under a new id."""
        draft_id = uuid.uuid4().hex[:12]
        self._write(self._owner_dir(owner_id) / f"{draft_id}.yaml", draft_id, owner_id, draft)
        return draft_id

    def update(self, draft_id: str, draft: DraftRecord) -> None:
        """Overwrite an existing draft, keeping its owner."""
        path = self._find(draft_id)
        if path is None:
            raise KeyError(draft_id)

        artifact = self._read(path)
        self._write(path, draft_id, artifact["owner_id"], draft)

    def get(self, draft_id: str) -> Optional[DraftRecord]:
        path = self._find(draft_id)
        if path is None:
            return None
        return DraftRecord.from_dict(self._read(path)["draft"])

    def list_by_owner(self, owner_id: str) -> list[tuple[str, DraftRecord]]:
        """Drafts of one owner, most recently saved first."""
        owner_dir = self._owner_dir(owner_id, create=False)
        if not owner_dir.exists():
            return []

        artifacts = [self._read(path) for path in owner_dir.glob("*.yaml")]
        artifacts.sort(key=lambda a: a.get("saved_at", ""), reverse=True)
        return [(a["id"], DraftRecord.from_dict(a["draft"])) for a in artifacts]

    def delete(self, draft_id: str) -> bool:
        path = self._find(draft_id)
        if path is None:
            return False
        path.unlink()
        return True

    def _write(self, path: Path, draft_id: str, owner_id: str, draft: DraftRecord) -> None:
        artifact = {
            "id": draft_id,
            "owner_id": owner_id,
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "draft": draft.to_dict(),
        }
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(artifact, f, allow_unicode=True, default_flow_style=False, sort_keys=False)

    def _read(self, path: Path) -> dict:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _find(self, draft_id: str) -> Optional[Path]:
        if not re.fullmatch(r"[0-9a-f]+", draft_id or ""):
            return None
        matches = list(self.storage_dir.glob(f"*/{draft_id}.yaml"))
        return matches[0] if matches else None

    def _owner_dir(self, owner_id: str, create: bool = True) -> Path:
        # Create safe directory name from owner id
        safe_owner = re.sub(r"[^\w.-]", "_", owner_id).strip(".") or "_"
        owner_dir = self.storage_dir / safe_owner
        if create:
            owner_dir.mkdir(parents=True, exist_ok=True)
        return owner_dir
