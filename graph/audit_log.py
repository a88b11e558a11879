"""Structured JSONL log of committed row mutations."""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from store.table import RowMutation


class MutationAuditLog:
    """Writes every committed mutation as one JSON line."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("bff.audit")

    @staticmethod
    def _hash_payload(payload: dict[str, Any]) -> str:
        encoded = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()

    def log(self, table: str, mutation: RowMutation, principal: str) -> None:
        """Append one JSONL audit event."""
        payload = mutation.to_dict()
        event = {
            "timestamp": datetime.now(UTC).isoformat(),
            "table": table,
            "principal": principal,
            "row_key": payload["row_key"],
            "puts": payload["puts"],
            "deletes": payload["deletes"],
            "payload_hash": self._hash_payload(payload),
        }
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(event, ensure_ascii=True) + "\n")
        self.logger.info(json.dumps(event, ensure_ascii=True))

    def read(self) -> list[dict[str, Any]]:
        """Return all events recorded so far."""
        if not self.log_path.exists():
            return []
        with self.log_path.open("r", encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]
