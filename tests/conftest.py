import os, sys, copy
# lägg till projektroten (mappen som innehåller "src") först i sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Testerna ska aldrig röra en riktig databasfil
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from src.server.db.session import get_session, init_db
from src.server.main import app
from src.server.settings.config import settings


CURRENT = {
    "clients": [
        {"id": 1, "nome": "Anna", "cognome": "Bianchi", "email": "anna@example.it", "telefono": "055"},
    ],
    "materials": [
        {"id": 1, "descrizione": "Tubo", "qta": 10, "costo": 6.5, "prezzo": 10.0, "iva": 22},
    ],
    "jobs": [
        {"id": 1, "data": "2025-03-01", "clienteId": 1, "luogo": "Firenze",
         "descrizione": "Sostituzione caldaia", "ore": 4, "tariffa": 35, "sconto": 0,
         "iva": 22, "pagato": False, "files": []},
    ],
    "quotes": [
        {"id": 1, "numero": "2025-001", "data": "2025-03-02", "clienteId": 1, "oggetto": "Impianto",
         "validita": 30, "stato": "In attesa",
         "voci": [{"id": 1, "descrizione": "Tubo", "quantita": 2, "prezzo": 10.0, "totale": 20.0, "materialId": 1}]},
    ],
    "invoices": [
        {"id": 1, "numero": "2025/0001", "data": "2025-03-05", "clienteId": 1, "jobId": 1,
         "voci": [], "subtotale": 140.0, "iva": 30.8, "totale": 170.8, "pagata": False},
    ],
    "appointments": [
        {"id": 1, "datetime": "2025-03-10T09:00", "clienteId": 1, "tipo": "Manutenzione",
         "durata": 2, "note": "", "stato": "Programmato"},
    ],
}

IMPORTED = {
    "clients": [
        {"id": 7, "nome": "anna", "cognome": "BIANCHI", "email": "", "telefono": "055"},
        {"id": 8, "nome": "Marco", "cognome": "Verdi", "email": "marco@example.it", "telefono": "099"},
    ],
    "materials": [
        {"id": 11, "descrizione": "tubo", "qta": 3, "costo": 6.5, "prezzo": 10.009, "iva": 22},
        {"id": 12, "descrizione": "Raccordo", "qta": 40, "costo": 1.2, "prezzo": 2.5, "iva": 22},
    ],
    "jobs": [
        {"id": 3, "data": "2025-03-01", "clienteId": 7, "descrizione": "sostituzione CALDAIA", "ore": 4},
        {"id": 4, "data": "2025-04-01", "clienteId": 8, "descrizione": "Nuovo impianto", "ore": 8},
    ],
    "quotes": [
        {"id": 5, "numero": "2025-001", "data": "2025-01-15", "clienteId": 8, "oggetto": "Altro", "voci": []},
        {"id": 6, "numero": "2025-002", "data": "2025-04-02", "clienteId": 8, "oggetto": "Bagno",
         "stato": "In attesa",
         "voci": [
             {"id": 1, "descrizione": "Raccordo", "quantita": 4, "prezzo": 2.5, "totale": 10.0, "materialId": 12},
             {"id": 2, "descrizione": "Tubo", "quantita": 1, "prezzo": 10.0, "totale": 10.0, "materialId": 11},
         ]},
    ],
    "invoices": [
        {"id": 1, "numero": "2025/0001", "data": "2025-02-01", "clienteId": 8, "totale": 999.0},
        {"id": 2, "numero": "2025/0002", "data": "2025-04-10", "clienteId": 8, "jobId": 4, "quoteId": 6,
         "voci": [], "subtotale": 20.0, "iva": 4.4, "totale": 24.4, "pagata": False},
    ],
    "appointments": [
        {"id": 3, "datetime": "2025-03-10T09:00", "clienteId": 7, "tipo": "Manutenzione"},
        {"id": 4, "datetime": "2025-04-03T14:30", "clienteId": 8, "tipo": "Sopralluogo"},
    ],
    "exportDate": "2025-04-11T10:00:00.000Z",
    "appVersion": "2.0.0",
    "appName": "HB Impianti",
}


@pytest.fixture
def current():
    return copy.deepcopy(CURRENT)


@pytest.fixture
def imported():
    return copy.deepcopy(IMPORTED)


@pytest.fixture(autouse=True)
def _event_log_in_tmp(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "event_log_dir", str(tmp_path / "logs"))


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    return eng


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def client(engine):
    def _override_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _override_session
    yield TestClient(app)
    app.dependency_overrides.clear()
