"""
Two-tier cache: the server copy of each collection, mirrored to local JSON files.

When the server cannot be reached, writes land in the local mirror so nothing
typed is lost. What happens to those local-only writes afterwards is decided
by an explicit SyncPolicy:

- DISCARD: the next successful sync replaces them with the server copy.
- QUEUE: they are kept in an outbox and replayed, in order, before the next
  successful sync.
- SURFACE: they are kept, overlaid on the server copy and reported by
  ``unsynced()``; they are only sent when ``push()`` is called explicitly.
"""
import json
import logging
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .api import ApiError, NetworkError, Resource

logger = logging.getLogger(__name__)

LOCAL_ID_PREFIX = "local-"
UNSYNCED_FLAG = "_unsynced"


class SyncPolicy(str, Enum):
    DISCARD = "discard"
    QUEUE = "queue"
    SURFACE = "surface"


class LocalMirror:
    """One JSON file per collection: {"records": [...], "outbox": [...]}"""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def load(self, name: str) -> Dict[str, List[Dict[str, Any]]]:
        path = self.path(name)
        if not path.exists():
            return {"records": [], "outbox": []}
        try:
            state = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Local mirror {path} unreadable, starting empty: {e}")
            return {"records": [], "outbox": []}
        return {"records": state.get("records", []), "outbox": state.get("outbox", [])}

    def save(self, name: str, records: List[Dict[str, Any]], outbox: List[Dict[str, Any]]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = {"records": records, "outbox": outbox}
        self.path(name).write_text(json.dumps(payload, ensure_ascii=False, default=str), encoding="utf-8")


def deferrable(error: Exception) -> bool:
    """Errors that keep a write in the outbox instead of losing it."""
    return isinstance(error, NetworkError) or (isinstance(error, ApiError) and error.retryable)


def is_local(record_id: Optional[str]) -> bool:
    return bool(record_id) and record_id.startswith(LOCAL_ID_PREFIX)


def apply_op(records: List[Dict[str, Any]], op: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Apply one outbox operation to a list of records, returning a new list."""
    kind, record_id = op["op"], op["id"]
    if kind == "create":
        return [r for r in records if r.get("id") != record_id] + [dict(op["data"], id=record_id, **{UNSYNCED_FLAG: True})]
    if kind == "update":
        return [dict(r, **op["data"], **{UNSYNCED_FLAG: True}) if r.get("id") == record_id else r for r in records]
    if kind == "delete":
        return [r for r in records if r.get("id") != record_id]
    raise ValueError(f"Unknown outbox operation {kind!r}")


class SyncedCollection:
    def __init__(self, name: str, resource: Resource, mirror: LocalMirror,
                 policy: SyncPolicy = SyncPolicy.QUEUE, params: Optional[Dict[str, Any]] = None):
        self.name = name
        self.resource = resource
        self.mirror = mirror
        self.policy = SyncPolicy(policy)
        self.params = params or {}
        state = mirror.load(name)
        self.records: List[Dict[str, Any]] = state["records"]
        self.outbox: List[Dict[str, Any]] = state["outbox"]
        self.offline = False

    def _save(self) -> None:
        self.mirror.save(self.name, self.records, self.outbox)

    def _remember(self, op: Dict[str, Any]) -> None:
        self.records = apply_op(self.records, op)
        if self.policy is not SyncPolicy.DISCARD:
            self.outbox.append(op)
        self.offline = True
        self._save()
        logger.warning(f"{self.name}: server unavailable, kept {op['op']} of {op['id']} locally")

    # ---------------------------------------------------------------- reads

    def refresh(self) -> List[Dict[str, Any]]:
        """Pull the server copy; fall back to the local mirror when offline or signed out."""
        try:
            if self.policy is SyncPolicy.QUEUE:
                self.push()
            server_records = self.resource.list(**self.params).get("data", [])
        except (NetworkError, ApiError) as e:
            if not deferrable(e):
                raise
            self.offline = True
            state = self.mirror.load(self.name)
            self.records, self.outbox = state["records"], state["outbox"]
            return self.records

        self.offline = False
        if self.policy is SyncPolicy.DISCARD:
            self.outbox = []
        records = server_records
        for op in self.outbox:
            records = apply_op(records, op)
        self.records = records
        self._save()
        return self.records

    def unsynced(self) -> List[Dict[str, Any]]:
        """Local-only writes not yet accepted by the server."""
        return list(self.outbox)

    # --------------------------------------------------------------- writes

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            record = self.resource.create(data)["data"]
        except (NetworkError, ApiError) as e:
            if not deferrable(e):
                raise
            op = {"op": "create", "id": f"{LOCAL_ID_PREFIX}{uuid.uuid4()}", "data": dict(data)}
            self._remember(op)
            return next(r for r in self.records if r.get("id") == op["id"])
        self.records = [record] + [r for r in self.records if r.get("id") != record.get("id")]
        self._save()
        return record

    def update(self, record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        if is_local(record_id):
            op = {"op": "update", "id": record_id, "data": dict(data)}
            self._remember(op)
            return next(r for r in self.records if r.get("id") == record_id)
        try:
            record = self.resource.update(record_id, data)["data"]
        except (NetworkError, ApiError) as e:
            if not deferrable(e):
                raise
            op = {"op": "update", "id": record_id, "data": dict(data)}
            self._remember(op)
            return next((r for r in self.records if r.get("id") == record_id), dict(data, id=record_id))
        self.records = [record if r.get("id") == record_id else r for r in self.records]
        self._save()
        return record

    def delete(self, record_id: str) -> None:
        if is_local(record_id):
            self._forget_local(record_id)
            return
        try:
            self.resource.delete(record_id)
        except (NetworkError, ApiError) as e:
            if not deferrable(e):
                raise
            self._remember({"op": "delete", "id": record_id})
            return
        self.records = [r for r in self.records if r.get("id") != record_id]
        self._save()

    def _forget_local(self, record_id: str) -> None:
        """A record that never reached the server just disappears, outbox and all."""
        self.records = [r for r in self.records if r.get("id") != record_id]
        self.outbox = [op for op in self.outbox if op["id"] != record_id]
        self._save()

    # ----------------------------------------------------------------- sync

    def push(self) -> int:
        """
        Replay the outbox in order. Stops at the first network, session or server
        failure (raised, with the rest kept); drops operations the server rejects
        as invalid or missing, since a retry cannot fix them.
        """
        sent = 0
        id_map: Dict[str, str] = {}
        while self.outbox:
            op = self.outbox[0]
            record_id = id_map.get(op["id"], op["id"])
            try:
                if op["op"] == "create":
                    created = self.resource.create(op["data"])["data"]
                    id_map[op["id"]] = created["id"]
                elif op["op"] == "update":
                    self.resource.update(record_id, op["data"])
                elif op["op"] == "delete":
                    self.resource.delete(record_id)
            except (NetworkError, ApiError) as e:
                if deferrable(e):
                    self._rewrite_ids(id_map)
                    self._save()
                    raise
                logger.warning(f"{self.name}: server rejected queued {op['op']} of {record_id}, dropping it: {e.message}")
            self.outbox.pop(0)
            sent += 1
        self._rewrite_ids(id_map)
        self._save()
        return sent

    def _rewrite_ids(self, id_map: Dict[str, str]) -> None:
        if not id_map:
            return
        self.outbox = [dict(op, id=id_map.get(op["id"], op["id"])) for op in self.outbox]
        self.records = [dict(r, id=id_map.get(r.get("id"), r.get("id"))) for r in self.records]
