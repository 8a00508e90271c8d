from pydantic import BaseModel
from dotenv import load_dotenv
import os

load_dotenv()

class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "HB Impianti")
    app_version: str = os.getenv("APP_VERSION", "2.0.0")
    environment: str = os.getenv("ENVIRONMENT", "dev")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./gestionale.db")
    debug: bool = os.getenv("DEBUG", "0") == "1"
    # Backupfiler heter <prefix>_YYYY-MM-DD.json
    backup_prefix: str = os.getenv("BACKUP_PREFIX", "HB_Backup")
    # Händelselogg (JSON Lines) för importer
    event_log_dir: str = os.getenv("EVENT_LOG_DIR", "knowledge/logs")

settings = Settings()
