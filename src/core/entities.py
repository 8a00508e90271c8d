"""
Entiteter i backupen: sex samlingar med poster (dicts) med heltals-id.

Nycklarna i JSON är de som appen sparar (italienska):
  - clients:      nome, cognome, email, telefono
  - materials:    descrizione, qta, costo, prezzo, iva
  - jobs:         data, clienteId, luogo, descrizione, ore, tariffa, ...
  - quotes:       numero, data, clienteId, oggetto, voci[{..., materialId}]
  - invoices:     numero, data, clienteId, jobId, voci, subtotale, iva, totale
  - appointments: datetime (eller data + ora), clienteId, tipo, durata, ...

Obs: appen sparar kundreferensen som "clienteId", äldre backuper har "clientId".
Vi läser båda och skriver tillbaka på den nyckel posten faktiskt har.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

# Ordningen spelar roll: senare samlingar använder id-mappningar från tidigare.
ENTITY_NAMES: Tuple[str, ...] = (
    "clients",
    "materials",
    "jobs",
    "quotes",
    "invoices",
    "appointments",
)

CLIENT_REF_KEYS: Tuple[str, ...] = ("clienteId", "clientId")
LINE_ITEM_KEYS: Tuple[str, ...] = ("voci", "items")


def normalize_snapshot(data: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Returnerar en ny dict med en lista per entitet.

    - saknad eller None samling → []
    - samling som inte är en lista → TypeError
    - övriga toppnycklar (exportDate, appVersion, ...) tas inte med
    """
    if not isinstance(data, dict):
        raise TypeError(f"Snapshot måste vara ett objekt, fick {type(data).__name__}")

    out: Dict[str, List[Dict[str, Any]]] = {}
    for name in ENTITY_NAMES:
        value = data.get(name)
        if value is None:
            out[name] = []
            continue
        if not isinstance(value, list):
            raise TypeError(f"Samlingen '{name}' måste vara en lista, fick {type(value).__name__}")
        out[name] = list(value)
    return out


def snapshot_counts(snapshot: Dict[str, Any]) -> Dict[str, int]:
    return {name: len(snapshot.get(name) or []) for name in ENTITY_NAMES}


def has_any_records(snapshot: Dict[str, Any]) -> bool:
    return sum(snapshot_counts(snapshot).values()) > 0


def _as_int_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def max_id(records: List[Dict[str, Any]]) -> int:
    """Högsta heltals-id i listan, 0 om listan är tom (eller saknar id)."""
    best = 0
    for r in records:
        rid = _as_int_id(r.get("id")) if isinstance(r, dict) else None
        if rid is not None and rid > best:
            best = rid
    return best


def next_id(records: List[Dict[str, Any]]) -> int:
    return max_id(records) + 1


# ---------- Fältåtkomst ----------

def client_ref(record: Dict[str, Any]) -> Any:
    for key in CLIENT_REF_KEYS:
        if record.get(key) is not None:
            return record[key]
    return None


def set_client_ref(record: Dict[str, Any], value: Any) -> None:
    """Skriver kundreferensen på alla nycklar posten har (minst clienteId)."""
    present = [k for k in CLIENT_REF_KEYS if k in record]
    for key in present or [CLIENT_REF_KEYS[0]]:
        record[key] = value


def line_items_key(record: Dict[str, Any]) -> Optional[str]:
    for key in LINE_ITEM_KEYS:
        if isinstance(record.get(key), list):
            return key
    return None


def appointment_slot(record: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """
    (datum, klockslag) för en bokning.

    Äldre poster har "data" + "ora", appen sparar "datetime" som
    "2025-03-14T09:30". Saknas något blir det None.
    """
    date = record.get("data")
    time = record.get("ora")
    if date is not None and time is not None:
        return date, time

    raw = record.get("datetime")
    if isinstance(raw, str) and ("T" in raw or " " in raw.strip()):
        sep = "T" if "T" in raw else " "
        d, t = raw.strip().split(sep, 1)
        # "09:30:00.000Z" → "09:30"
        t = t[:5] if len(t) >= 5 else t
        return (date if date is not None else d or None), (time if time is not None else t or None)

    return date, time
