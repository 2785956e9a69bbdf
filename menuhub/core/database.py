from __future__ import annotations

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from menuhub.core.config import DATABASE_URL

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_session_factory(app) -> sessionmaker:
    """Session factory bound to the app; tests swap in an isolated store."""
    return getattr(app.state, "session_factory", None) or SessionLocal


def get_db(request: Request) -> Iterator[Session]:
    db = get_session_factory(request.app)()
    try:
        yield db
    finally:
        db.close()
