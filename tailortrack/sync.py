"""
Backup of the order book to the spreadsheet web app.

The whole state (orders, staff book, entry statuses) is posted as one
snapshot. When the endpoint can't be reached the same snapshot is written to
three JSON files on disk, one per collection, holding only the latest copy.
Nothing is retried automatically.
"""
import json
import os
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from .errors import TransportError
from .models import utcnow
from .schemas import OrderOut, StaffBookOut, EntryStatusOut

logger = logging.getLogger(__name__)

# slot name -> snapshot key
FALLBACK_SLOTS = {
    "rajmahal_orders": "orders",
    "rajmahal_staff_book": "staffBook",
    "rajmahal_entry_statuses": "entryStatuses",
}


def build_snapshot(store) -> Dict[str, Any]:
    def dump(model, rows):
        return [model.model_validate(r).model_dump(mode="json", by_alias=True) for r in rows]

    return {
        "orders": dump(OrderOut, store.list_orders()),
        "staffBook": dump(StaffBookOut, store.list_staff_book()),
        "entryStatuses": dump(EntryStatusOut, store.list_entry_statuses()),
    }


class SyncGateway:
    def __init__(self, url: str, timeout: float = 15.0):
        self.url = (url or "").strip()
        self.timeout = timeout
        self.last_sync: Optional[datetime] = None

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def push(self, snapshot: Dict[str, Any]) -> Dict[str, Any]:
        """Post the snapshot and return the script's status envelope."""
        payload = {"action": "sync", **snapshot}
        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Failed to sync to Google Sheets: {e}") from e

        if not response.ok:
            raise TransportError(f"Failed to sync to Google Sheets: HTTP error! status: {response.status_code}")
        try:
            result = response.json()
        except ValueError:
            result = {"status": "success", "raw": response.text}
        if isinstance(result, dict) and result.get("status") == "error":
            raise TransportError(f"Failed to sync to Google Sheets: {result.get('message', 'unknown error')}")

        self.last_sync = utcnow()
        logger.info(
            "Synced %d orders, %d staff ranges, %d entry statuses",
            len(snapshot.get("orders", [])),
            len(snapshot.get("staffBook", [])),
            len(snapshot.get("entryStatuses", [])),
        )
        return result


class LocalFallback:
    def __init__(self, directory: str):
        self.directory = Path(directory)

    def path(self, slot: str) -> Path:
        return self.directory / f"{slot}.json"

    def save(self, snapshot: Dict[str, Any]) -> None:
        """Write every slot to a temp file first, then move them into place."""
        self.directory.mkdir(parents=True, exist_ok=True)
        staged = []
        try:
            for slot, key in FALLBACK_SLOTS.items():
                tmp = self.path(slot).with_suffix(".json.tmp")
                tmp.write_text(json.dumps(snapshot.get(key, []), ensure_ascii=False), encoding="utf-8")
                staged.append((tmp, self.path(slot)))
        except OSError:
            for tmp, _ in staged:
                tmp.unlink(missing_ok=True)
            raise
        for tmp, target in staged:
            os.replace(tmp, target)
        logger.info("Snapshot written to local fallback in %s", self.directory)

    def load(self) -> Dict[str, Optional[list]]:
        """Latest snapshot per slot; a missing or unreadable slot comes back as None."""
        out: Dict[str, Optional[list]] = {}
        for slot, key in FALLBACK_SLOTS.items():
            p = self.path(slot)
            out[key] = None
            if not p.exists():
                continue
            try:
                out[key] = json.loads(p.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable fallback slot %s: %s", p, e)
        return out


def push_snapshot(gateway: SyncGateway, fallback: LocalFallback, snapshot: Dict[str, Any]) -> Dict[str, Any]:
    """Push to the spreadsheet; on failure keep a local copy and re-raise."""
    try:
        return gateway.push(snapshot)
    except TransportError as e:
        logger.warning("External sync failed, keeping local copy: %s", e.message)
        try:
            fallback.save(snapshot)
        except OSError:
            logger.exception("Could not write local fallback to %s", fallback.directory)
        raise


def background_sync(gateway: SyncGateway, fallback: LocalFallback, snapshot: Dict[str, Any]) -> None:
    """Auto-sync after a save. Failures are logged and never reach the client."""
    try:
        if gateway.configured:
            push_snapshot(gateway, fallback, snapshot)
        else:
            fallback.save(snapshot)
    except TransportError:
        logger.error("Background sync failed; latest snapshot is only stored locally")
    except OSError:
        logger.exception("Could not write local fallback to %s", fallback.directory)
