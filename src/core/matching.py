"""
Dubblettregler per entitet.

Varje regel har signaturen (kandidat, redan_mergade, remaps) -> post | None
och returnerar FÖRSTA posten i listan som räknas som samma sak.

Saknas ett fält på någon sida räknas det aldrig som lika (ingen träff),
dvs posten läggs till i stället för att krascha.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from src.core.entities import appointment_slot, client_ref
from src.core.remaps import IdRemaps, same_id

# Valutatolerans (absolut, inte procent)
PRICE_EPSILON = 0.01

Matcher = Callable[[Dict[str, Any], List[Dict[str, Any]], IdRemaps], Optional[Dict[str, Any]]]


def _same_text(a: Any, b: Any) -> bool:
    """Skiftlägesokänslig jämförelse, None matchar aldrig."""
    if a is None or b is None:
        return False
    return str(a).lower() == str(b).lower()


def _same_value(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return False
    return a == b


def _to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().replace(",", "."))
    except ValueError:
        return None


def _same_price(a: Any, b: Any) -> bool:
    fa, fb = _to_number(a), _to_number(b)
    if fa is None or fb is None:
        return False
    return abs(fa - fb) < PRICE_EPSILON


# Kundreferens som finns men inte gick att mappa. Sådana referenser sparas
# som None (se merge._rewrite_client_ref), så det är None vi jämför mot.
_UNRESOLVED = object()


def _mapped_client(candidate: Dict[str, Any], remaps: IdRemaps) -> Any:
    ref = client_ref(candidate)
    if ref is None:
        return None
    mapped = remaps.resolve("clients", ref)
    return _UNRESOLVED if mapped is None else mapped


def _same_client(record: Dict[str, Any], mapped: Any) -> bool:
    if mapped is _UNRESOLVED:
        return client_ref(record) is None
    return same_id(client_ref(record), mapped)


def _first(existing: List[Dict[str, Any]], pred: Callable[[Dict[str, Any]], bool]) -> Optional[Dict[str, Any]]:
    for rec in existing:
        if isinstance(rec, dict) and pred(rec):
            return rec
    return None


# ---------- Regler ----------

def match_client(candidate, existing, remaps):
    # nome + cognome (skiftlägesokänsligt) + exakt telefon
    return _first(
        existing,
        lambda c: _same_text(c.get("nome"), candidate.get("nome"))
        and _same_text(c.get("cognome"), candidate.get("cognome"))
        and _same_value(c.get("telefono"), candidate.get("telefono")),
    )


def match_material(candidate, existing, remaps):
    return _first(
        existing,
        lambda m: _same_text(m.get("descrizione"), candidate.get("descrizione"))
        and _same_price(m.get("prezzo"), candidate.get("prezzo")),
    )


def match_job(candidate, existing, remaps):
    mapped_client = _mapped_client(candidate, remaps)
    return _first(
        existing,
        lambda j: _same_client(j, mapped_client)
        and _same_value(j.get("data"), candidate.get("data"))
        and _same_text(j.get("descrizione"), candidate.get("descrizione")),
    )


def match_quote(candidate, existing, remaps):
    # Medvetet löst: samma nummer ELLER samma kund + datum
    mapped_client = _mapped_client(candidate, remaps)
    return _first(
        existing,
        lambda q: _same_value(q.get("numero"), candidate.get("numero"))
        or (
            _same_client(q, mapped_client)
            and _same_value(q.get("data"), candidate.get("data"))
        ),
    )


def match_invoice(candidate, existing, remaps):
    # Bara fakturanummer. Olika belopp med samma nummer räknas som dubblett.
    return _first(existing, lambda i: _same_value(i.get("numero"), candidate.get("numero")))


def match_appointment(candidate, existing, remaps):
    mapped_client = _mapped_client(candidate, remaps)
    date, time = appointment_slot(candidate)

    def _pred(a: Dict[str, Any]) -> bool:
        a_date, a_time = appointment_slot(a)
        return (
            _same_client(a, mapped_client)
            and _same_value(a_date, date)
            and _same_value(a_time, time)
        )

    return _first(existing, _pred)


MATCHERS: Dict[str, Matcher] = {
    "clients": match_client,
    "materials": match_material,
    "jobs": match_job,
    "quotes": match_quote,
    "invoices": match_invoice,
    "appointments": match_appointment,
}


def find_match(entity: str, candidate, existing, remaps) -> Optional[Dict[str, Any]]:
    return MATCHERS[entity](candidate, existing, remaps)
