import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


DEFAULT_DATABASE_URL = "sqlite:///walking_rpg.db"


def get_database_url() -> str:
    return os.getenv("WALKRPG_DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL


engine = create_engine(get_database_url(), echo=False, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def bind_engine(database_url: str):
    """Point every SessionLocal user at ``database_url``; the URL may arrive after import."""
    global engine
    if str(engine.url) != database_url:
        engine = create_engine(database_url, echo=False, future=True)
        SessionLocal.configure(bind=engine)
    return engine
