"""
Statistik för en merge: tillagda / hoppade över (dubbletter) per entitet,
plus antal referenser som inte gick att mappa om.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from src.core.entities import ENTITY_NAMES

# Etiketter för sammanfattningen
LABELS: Dict[str, str] = {
    "clients": "Kunder",
    "materials": "Material",
    "jobs": "Jobb",
    "quotes": "Offerter",
    "invoices": "Fakturor",
    "appointments": "Bokningar",
}


def _zeroed() -> Dict[str, int]:
    return {name: 0 for name in ENTITY_NAMES}


@dataclass
class MergeStats:
    added: Dict[str, int] = field(default_factory=_zeroed)
    skipped: Dict[str, int] = field(default_factory=_zeroed)
    unresolved: Dict[str, int] = field(default_factory=_zeroed)

    def record_added(self, entity: str) -> None:
        self.added[entity] += 1

    def record_skipped(self, entity: str) -> None:
        self.skipped[entity] += 1

    def record_unresolved(self, entity: str, n: int = 1) -> None:
        self.unresolved[entity] += n

    def as_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            "added": dict(self.added),
            "skipped": dict(self.skipped),
            "unresolved": dict(self.unresolved),
        }


def totals(stats: MergeStats) -> Dict[str, int]:
    return {
        "added": sum(stats.added.values()),
        "skipped": sum(stats.skipped.values()),
        "unresolved": sum(stats.unresolved.values()),
    }


def flat_counts(stats: MergeStats) -> Dict[str, int]:
    """
    Platt form som gamla appen använde:
      {"clientsAdded": 1, "clientsSkipped": 0, "materialsAdded": ..., ...}
    """
    out: Dict[str, int] = {}
    for name in ENTITY_NAMES:
        out[f"{name}Added"] = stats.added[name]
        out[f"{name}Skipped"] = stats.skipped[name]
    return out


def format_summary(stats: MergeStats) -> str:
    """
    Läsbar sammanfattning, t.ex.

      Sammanslagning klar!

      TILLAGDA:
      • Kunder: 1

      DUBBLETTER SOM HOPPADES ÖVER:
      • Kunder: 1

      Totalt: +1 poster
    """
    t = totals(stats)
    lines = ["Sammanslagning klar!", "", "TILLAGDA:"]
    for name in ENTITY_NAMES:
        if stats.added[name] > 0:
            lines.append(f"• {LABELS[name]}: {stats.added[name]}")

    if t["skipped"] > 0:
        lines += ["", "DUBBLETTER SOM HOPPADES ÖVER:"]
        for name in ENTITY_NAMES:
            if stats.skipped[name] > 0:
                lines.append(f"• {LABELS[name]}: {stats.skipped[name]}")

    if t["unresolved"] > 0:
        lines += ["", "REFERENSER UTAN MOTSVARIGHET (nollställda):"]
        for name in ENTITY_NAMES:
            if stats.unresolved[name] > 0:
                lines.append(f"• {LABELS[name]}: {stats.unresolved[name]}")

    lines += ["", f"Totalt: +{t['added']} poster"]
    return "\n".join(lines)


def format_notification(stats: MergeStats) -> str:
    t = totals(stats)
    return f"Data sammanslagen: +{t['added']} nya, {t['skipped']} dubbletter hoppades över"
