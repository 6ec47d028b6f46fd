# app/core/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.core.config import get_settings

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def build_engine(url: str):
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    # in-memory SQLite lives in one connection; every session must reuse it
    if url in IN_MEMORY_URLS:
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = build_engine(get_settings().DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
Base = declarative_base()


def init_db(bind=None) -> None:
    import app.ticket.models  # noqa: F401  registers the tickets table

    Base.metadata.create_all(bind=bind or engine)


# One session per request; screens never share one
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
