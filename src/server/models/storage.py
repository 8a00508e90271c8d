# src/server/models/storage.py
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class StorageEntry(SQLModel, table=True):
    """
    En nyckel → ett JSON-värde, som webbläsarens localStorage.
    Nycklarna är entitetsnamnen: clients, materials, jobs, quotes, invoices, appointments.
    """
    key: str = Field(primary_key=True)
    value: str = "[]"        # JSON-serialiserad lista
    updated_at: Optional[datetime] = None  # UTC med tidszon
