"""
Global pytest configuration for Hydrant tests.

Goals
-----
- Keep tests fully local/offline (in-memory SQLite, httpx MockTransport).
- Provide small Post/Blog models plus a SQL statement recorder so tests can
  assert how many batched lookups hydration issued.
- Keep logging quiet unless a test raises the level.
"""

from __future__ import annotations

import logging
import os
from typing import Generator, List, Optional

import pytest

# ---------------------------------------------------------------------
# Environment defaults (must be set BEFORE importing application code)
# ---------------------------------------------------------------------
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("PAGINATE_RESULTS", "true")
os.environ.setdefault("STRICT_HYDRATION", "false")
os.environ.setdefault("SKIP_MALFORMED_FACET_ROWS", "false")
os.environ.setdefault("SOLR_URL", "http://solr.test/solr/core")

from sqlalchemy import ForeignKey, String, create_engine, event  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import (  # noqa: E402
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    sessionmaker,
)

from hydrant.search.backends.sql import SQLAlchemyEntityLoader  # noqa: E402

# ---------------------------------------------------------------------
# Logging hygiene for noisy libraries
# ---------------------------------------------------------------------
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ---------------------------------------------------------------------
# Test models
# ---------------------------------------------------------------------
class Base(DeclarativeBase):
    pass


class Blog(Base):
    __tablename__ = "blog"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String, default="")


class Post(Base):
    __tablename__ = "post"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String, default="")
    blog_id: Mapped[Optional[int]] = mapped_column(ForeignKey("blog.id"), nullable=True)


# ---------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------
@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    eng = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
    session = factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def statements(engine) -> List[str]:
    """Every SQL statement executed on the engine after the fixture is set up."""
    seen: List[str] = []

    @event.listens_for(engine, "before_cursor_execute")
    def _record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    return seen


@pytest.fixture
def loader(db) -> SQLAlchemyEntityLoader:
    return SQLAlchemyEntityLoader(db, base=Base)


def selects_from(statements: List[str], table: str) -> int:
    """Count SELECT statements that read from `table`."""
    needle = f"FROM {table}"
    return sum(1 for s in statements if s.lstrip().upper().startswith("SELECT") and needle in s)


@pytest.fixture
def count_selects(statements):
    def _count(table: str) -> int:
        return selects_from(statements, table)

    return _count


@pytest.fixture
def make_blogs(db):
    def _make(n: int) -> List[Blog]:
        blogs = [Blog(name=f"Blog {i}") for i in range(n)]
        db.add_all(blogs)
        db.commit()
        return blogs

    return _make


@pytest.fixture
def make_posts(db):
    def _make(n: int) -> List[Post]:
        posts = [Post(title=f"Post {i}") for i in range(n)]
        db.add_all(posts)
        db.commit()
        return posts

    return _make
