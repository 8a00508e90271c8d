from .session import engine, init_db, get_session

__all__ = ["engine", "init_db", "get_session"]
