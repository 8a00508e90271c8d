# fil: src/services/storage.py

from __future__ import annotations

import json
import sys
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from src.core.entities import ENTITY_NAMES
from src.server.models import StorageEntry
from src.server.settings.config import settings


def get_storage(session: Session, key: str, fallback: Any) -> Any:
    """
    Hämtar ett JSON-värde för nyckeln.

    Returnerar fallback om nyckeln saknas eller om värdet är trasigt
    (hellre tom data än krasch).
    """
    entry = session.get(StorageEntry, key)
    if entry is None or not entry.value:
        return fallback

    try:
        data = json.loads(entry.value)
    except (TypeError, ValueError) as e:
        print(f"[storage] Kunde inte läsa '{key}': {e}", file=sys.stderr)
        return fallback

    return fallback if data is None else data


def set_storage(session: Session, key: str, value: Any) -> None:
    """
    Skriver värdet som JSON. Ingen commit, det gör anroparen
    (så att flera nycklar kan sparas i samma transaktion).
    """
    payload = json.dumps(value, ensure_ascii=False)
    entry = session.get(StorageEntry, key)
    if entry is None:
        entry = StorageEntry(key=key, value=payload)
    else:
        entry.value = payload
    entry.updated_at = datetime.now(timezone.utc)
    session.add(entry)


def load_snapshot(session: Session) -> Dict[str, List[Dict[str, Any]]]:
    """Alla sex samlingar. Något som inte är en lista räknas som tomt."""
    snapshot: Dict[str, List[Dict[str, Any]]] = {}
    for name in ENTITY_NAMES:
        data = get_storage(session, name, [])
        if not isinstance(data, list):
            print(f"[storage] '{name}' är inte en lista, använder [].", file=sys.stderr)
            data = []
        snapshot[name] = data
    return snapshot


def save_snapshot(session: Session, snapshot: Dict[str, Any]) -> None:
    # Skriver alltid alla sex nycklar, valfria samlingar som saknas blir []
    for name in ENTITY_NAMES:
        set_storage(session, name, snapshot.get(name) or [])


def create_backup_data(session: Session) -> Dict[str, Any]:
    data: Dict[str, Any] = dict(load_snapshot(session))
    data["exportDate"] = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    data["appVersion"] = settings.app_version
    data["appName"] = settings.app_name
    return data


def backup_filename(today: Optional[date] = None) -> str:
    """HB_Backup_2025-03-14.json"""
    today = today or date.today()
    return f"{settings.backup_prefix}_{today.isoformat()}.json"
