"""
Backup → befintlig data (merge).

- Slår ihop sex samlingar utan att dubblera poster som redan finns
- Nya poster får nya id (max befintligt id + löpnummer)
- Referenser (clienteId, materialId, jobId, quoteId) skrivs om via id-mappningar
  från tidigare steg, så att inget pekar ut i tomma intet
- Returnerar {merged, stats}; indata ändras aldrig

Ordningen i MERGE_STEPS är viktig: steg n använder bara mappningar från steg 1..n-1.
"""
from __future__ import annotations

import copy
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from src.core.entities import (
    ENTITY_NAMES,
    client_ref,
    line_items_key,
    next_id,
    normalize_snapshot,
    set_client_ref,
)
from src.core.matching import find_match
from src.core.remaps import IdRemaps
from src.core.stats import MergeStats, format_summary, totals

Record = Dict[str, Any]
Snapshot = Dict[str, List[Record]]


class MergeError(Exception):
    """Oväntat fel under merge. Inget delresultat ska sparas."""


# ---------- Omskrivning av referenser ----------
# Varje funktion skriver om referenserna på en NY post och returnerar
# hur många referenser som inte gick att mappa (de sätts till None).

def _remap_field(record: Record, key: str, entity: str, remaps: IdRemaps) -> int:
    old = record.get(key)
    if old is None:
        return 0
    new = remaps.resolve(entity, old)
    record[key] = new
    return 1 if new is None else 0


def _rewrite_client_ref(record: Record, remaps: IdRemaps) -> int:
    old = client_ref(record)
    if old is None:
        return 0
    new = remaps.resolve("clients", old)
    set_client_ref(record, new)
    return 1 if new is None else 0


def _rewrite_line_items(record: Record, remaps: IdRemaps) -> int:
    key = line_items_key(record)
    if key is None:
        return 0
    unresolved = 0
    items = []
    for item in record[key]:
        if isinstance(item, dict) and item.get("materialId") is not None:
            item = dict(item)
            unresolved += _remap_field(item, "materialId", "materials", remaps)
        items.append(item)
    record[key] = items
    return unresolved


def _no_refs(record: Record, remaps: IdRemaps) -> int:
    return 0


def _rewrite_quote(record: Record, remaps: IdRemaps) -> int:
    return _rewrite_client_ref(record, remaps) + _rewrite_line_items(record, remaps)


def _rewrite_invoice(record: Record, remaps: IdRemaps) -> int:
    return (
        _rewrite_client_ref(record, remaps)
        + _remap_field(record, "jobId", "jobs", remaps)
        + _remap_field(record, "quoteId", "quotes", remaps)
        + _rewrite_line_items(record, remaps)
    )


@dataclass(frozen=True)
class MergeStep:
    entity: str
    rewrite: Callable[[Record, IdRemaps], int]
    # Vilken id-mappning steget fyller (None = ingen senare entitet pekar hit)
    remap_into: Optional[str] = None


MERGE_STEPS: List[MergeStep] = [
    MergeStep("clients", _no_refs, remap_into="clients"),
    MergeStep("materials", _no_refs, remap_into="materials"),
    MergeStep("jobs", _rewrite_client_ref, remap_into="jobs"),
    MergeStep("quotes", _rewrite_quote, remap_into="quotes"),
    MergeStep("invoices", _rewrite_invoice),
    MergeStep("appointments", _rewrite_client_ref),
]


@dataclass
class MergeResult:
    merged: Snapshot
    stats: MergeStats
    remaps: IdRemaps = field(default_factory=IdRemaps)

    @property
    def summary(self) -> str:
        return format_summary(self.stats)


def _merge_collection(
    step: MergeStep,
    existing: List[Record],
    incoming: List[Record],
    remaps: IdRemaps,
    stats: MergeStats,
) -> List[Record]:
    merged = list(existing)
    new_id = next_id(existing)

    for record in incoming:
        if not isinstance(record, dict):
            raise TypeError(
                f"{step.entity}: förväntade ett objekt, fick {type(record).__name__}"
            )

        old_id = record.get("id")
        match = find_match(step.entity, record, merged, remaps)
        if match is not None:
            if step.remap_into:
                remaps.remember(step.remap_into, old_id, match.get("id"))
            stats.record_skipped(step.entity)
            continue

        new_record = dict(record)
        new_record["id"] = new_id
        unresolved = step.rewrite(new_record, remaps)
        if unresolved:
            stats.record_unresolved(step.entity, unresolved)
            print(
                f"[merge] {step.entity} id={old_id}: {unresolved} referens(er) "
                "saknar motsvarighet i importen, sätts till None.",
                file=sys.stderr,
            )

        merged.append(new_record)
        if step.remap_into:
            remaps.remember(step.remap_into, old_id, new_id)
        new_id += 1
        stats.record_added(step.entity)

    return merged


def merge_snapshots(current: Dict[str, Any], imported: Dict[str, Any]) -> MergeResult:
    """
    Slår ihop imported in i current.

    Regler per entitet finns i src.core.matching. Första träffen vinner.
    Vid oväntat fel kastas MergeError och inget resultat returneras.
    """
    try:
        cur = copy.deepcopy(normalize_snapshot(current))
        imp = copy.deepcopy(normalize_snapshot(imported))

        remaps = IdRemaps()
        stats = MergeStats()
        merged: Snapshot = {}

        for step in MERGE_STEPS:
            merged[step.entity] = _merge_collection(
                step, cur[step.entity], imp[step.entity], remaps, stats
            )
    except Exception as e:  # noqa: BLE001
        print(f"[merge] Sammanslagningen avbröts: {e}", file=sys.stderr)
        raise MergeError(f"Sammanslagningen misslyckades: {e}") from e

    t = totals(stats)
    print(
        f"[merge] Klar: +{t['added']} nya, {t['skipped']} dubbletter, "
        f"{t['unresolved']} omappade referenser.",
        file=sys.stderr,
    )

    # Samma nyckelordning som ENTITY_NAMES
    return MergeResult(
        merged={name: merged[name] for name in ENTITY_NAMES},
        stats=stats,
        remaps=remaps,
    )


def overwrite_snapshot(imported: Dict[str, Any]) -> Snapshot:
    """Ersätt allt: importen blir den nya datan (valfria samlingar → [])."""
    return copy.deepcopy(normalize_snapshot(imported))
