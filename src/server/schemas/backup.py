# src/server/schemas/backup.py
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class ImportMode(str, Enum):
    merge = "merge"          # lägg till det som saknas
    overwrite = "overwrite"  # ersätt allt


class BackupIn(BaseModel):
    """
    En backupfil som den exporteras från appen.

    clients, materials, jobs och quotes måste finnas (listor, inte null).
    invoices och appointments saknas i äldre backuper → [].
    exportDate, appVersion, appName m.fl. får finnas men används inte.
    """
    model_config = ConfigDict(extra="allow")

    clients: List[Dict[str, Any]]
    materials: List[Dict[str, Any]]
    jobs: List[Dict[str, Any]]
    quotes: List[Dict[str, Any]]
    invoices: Optional[List[Dict[str, Any]]] = None
    appointments: Optional[List[Dict[str, Any]]] = None

    def to_snapshot(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "clients": list(self.clients),
            "materials": list(self.materials),
            "jobs": list(self.jobs),
            "quotes": list(self.quotes),
            "invoices": list(self.invoices or []),
            "appointments": list(self.appointments or []),
        }


class ImportPreviewOut(BaseModel):
    file_counts: Dict[str, int]
    current_counts: Dict[str, int]
    has_existing_data: bool


class ImportResultOut(BaseModel):
    mode: ImportMode
    added: Dict[str, int]
    skipped: Dict[str, int]
    unresolved: Dict[str, int]
    totals: Dict[str, int]
    counts: Dict[str, int]   # antal poster per samling efter importen
    summary: str
    message: str
