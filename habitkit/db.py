from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from habitkit.config import settings


def _normalize_database_url(raw_url: str) -> str:
    url = (raw_url or "").strip()
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://") :]
    if url.startswith("postgresql://") and "+psycopg" not in url:
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def build_engine(raw_url: str):
    url = _normalize_database_url(raw_url)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


def build_session_factory(bind) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind, future=True)


DATABASE_URL = _normalize_database_url(settings.DATABASE_URL)
engine = build_engine(DATABASE_URL)
SessionLocal = build_session_factory(engine)
