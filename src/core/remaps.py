"""
Id-mappningar under en merge: gammalt id (i importfilen) → id i resultatet.

Byggs upp steg för steg (kunder, material, jobb, offerter) och slängs när
merge-anropet är klart.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Optional


def id_key(value: Any) -> Optional[Hashable]:
    """
    Normaliserar ett id så att 7, 7.0 och "7" blir samma nyckel.

    Formulären i appen sparar ibland id som text, därför jämför vi på
    heltal när det går.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return int(s)
        except ValueError:
            return s
    try:
        hash(value)
    except TypeError:
        return None
    return value


def same_id(a: Any, b: Any) -> bool:
    ka, kb = id_key(a), id_key(b)
    return ka is not None and kb is not None and ka == kb


@dataclass
class IdRemaps:
    clients: Dict[Hashable, int] = field(default_factory=dict)
    materials: Dict[Hashable, int] = field(default_factory=dict)
    jobs: Dict[Hashable, int] = field(default_factory=dict)
    # Används bara för fakturornas quoteId
    quotes: Dict[Hashable, int] = field(default_factory=dict)

    def table(self, entity: str) -> Dict[Hashable, int]:
        try:
            return getattr(self, entity)
        except AttributeError:
            raise KeyError(f"Ingen id-mappning för '{entity}'") from None

    def remember(self, entity: str, old_id: Any, new_id: int) -> None:
        key = id_key(old_id)
        if key is None:
            # Post utan id: inget att mappa, men posten läggs ändå till
            return
        self.table(entity)[key] = new_id

    def resolve(self, entity: str, old_id: Any) -> Optional[int]:
        """Nytt id för old_id, eller None om det inte finns någon mappning."""
        key = id_key(old_id)
        if key is None:
            return None
        return self.table(entity).get(key)
