from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from sqlmodel import Session

from src.core.entities import ENTITY_NAMES, has_any_records, snapshot_counts
from src.core.merge import merge_snapshots, overwrite_snapshot
from src.core.stats import MergeStats, format_notification, totals
from src.server.schemas.backup import BackupIn, ImportMode
from src.server.settings.config import settings
from src.services.storage import create_backup_data, load_snapshot, save_snapshot

# Projektrot
ROOT = Path(__file__).resolve().parents[2]

# Ett enda meddelande till användaren vid fel, inga detaljer
GENERIC_FAILURE_MESSAGE = "Fel vid import av data. Befintlig data har inte ändrats."


class ImportFailed(Exception):
    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


def _log_dir() -> Path:
    p = Path(settings.event_log_dir)
    return p if p.is_absolute() else ROOT / p


def _append_json_line(path: Path, payload: Dict[str, Any]) -> None:
    """
    Skriver en rad JSON till en loggfil (JSON Lines-format).
    En rad per import → lätt att följa upp i efterhand.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False)
            f.write("\n")
    except Exception as e:  # noqa: BLE001
        print(f"[backup] Kunde inte skriva till logg {path}: {e}", file=sys.stderr)


def _log_import_event(
    *,
    mode: str,
    status: str,
    stats: Optional[MergeStats] = None,
    counts: Optional[Dict[str, int]] = None,
    error: Optional[str] = None,
) -> None:
    event: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "type": "import",
        "mode": mode,
        "status": status,
    }
    if stats is not None:
        event["stats"] = stats.as_dict()
    if counts is not None:
        event["counts"] = counts
    if error is not None:
        event["error"] = error
    _append_json_line(_log_dir() / "imports.jsonl", event)


def _overwrite_stats(counts: Dict[str, int]) -> MergeStats:
    # Vid överskrivning räknas allt i filen som tillagt
    stats = MergeStats()
    for name in ENTITY_NAMES:
        stats.added[name] = counts.get(name, 0)
    return stats


def _overwrite_summary(counts: Dict[str, int]) -> str:
    total = sum(counts.values())
    return f"Data ersatt med backupen: {total} poster importerades."


def preview_import(*, payload: BackupIn, session: Session) -> Dict[str, Any]:
    """
    Vad finns i filen och vad finns redan? Underlag för valet
    sammanslagning / överskrivning.
    """
    current_counts = snapshot_counts(load_snapshot(session))
    return {
        "file_counts": snapshot_counts(payload.to_snapshot()),
        "current_counts": current_counts,
        "has_existing_data": sum(current_counts.values()) > 0,
    }


def import_backup(*, payload: BackupIn, mode: ImportMode, session: Session) -> Dict[str, Any]:
    """
    Importerar en backup.

    Logik:
      1) Finns ingen data sedan tidigare → skriv över direkt (oavsett mode).
      2) mode=merge     → merge_snapshots(befintlig, import)
         mode=overwrite → importen ersätter allt
      3) Alla sex samlingar sparas och committas EN gång.
         Vid fel: rollback, ingenting ändras, ImportFailed kastas.
    """
    imported = payload.to_snapshot()

    try:
        current = load_snapshot(session)
        effective = mode if has_any_records(current) else ImportMode.overwrite

        if effective == ImportMode.merge:
            result = merge_snapshots(current, imported)
            new_data = result.merged
            stats = result.stats
            summary = result.summary
            message = format_notification(stats)
        else:
            new_data = overwrite_snapshot(imported)
            stats = _overwrite_stats(snapshot_counts(new_data))
            summary = _overwrite_summary(snapshot_counts(new_data))
            message = "Data ersatt."

        save_snapshot(session, new_data)
        session.commit()
    except Exception as e:  # noqa: BLE001
        session.rollback()
        print(f"[backup] Import ({mode.value}) misslyckades: {e}", file=sys.stderr)
        _log_import_event(mode=mode.value, status="failed", error=str(e))
        raise ImportFailed() from e

    counts = snapshot_counts(new_data)
    _log_import_event(mode=effective.value, status="ok", stats=stats, counts=counts)

    return {
        "mode": effective,
        "added": dict(stats.added),
        "skipped": dict(stats.skipped),
        "unresolved": dict(stats.unresolved),
        "totals": totals(stats),
        "counts": counts,
        "summary": summary,
        "message": message,
    }


def export_backup(*, session: Session) -> Dict[str, Any]:
    return create_backup_data(session)
