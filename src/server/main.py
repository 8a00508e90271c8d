import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.server.db.session import init_db
from src.server.api import health, backup
from src.server.settings.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    print("[server] Initierar databasen...", file=sys.stderr)
    init_db()
    yield
    print("[server] Avslutar appen...", file=sys.stderr)


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

# CORS – så att webbappen kan prata med backend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(health.router)
app.include_router(backup.router)            # /backup/export, /backup/preview, /backup/import
