# voxquery/db/connect.py

import os
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.pool import NullPool

from voxquery.logging import get_logger

logger = get_logger(__name__)


def get_db_dir() -> Path:
    db_dir = Path(os.environ.get("VOXQUERY_DB_DIR", Path.home() / ".voxquery")).expanduser()
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir


def get_db_url() -> str:
    """Return the database URL used by the query tool.

    Resolution order:
      1) env ``VOXQUERY_DB_URL`` (any SQLAlchemy URL)
      2) MySQL from ``DB_HOST`` / ``DB_USER`` / ``DB_PASS`` / ``DB_NAME``
      3) SQLite file ``voxquery.db`` under :func:`get_db_dir`
    """

    raw = (os.getenv("VOXQUERY_DB_URL") or "").strip()
    if raw:
        return raw

    host = (os.getenv("DB_HOST") or "").strip()
    if host:
        url = URL.create(
            "mysql+pymysql",
            username=(os.getenv("DB_USER") or "").strip() or None,
            password=os.getenv("DB_PASS") or None,
            host=host,
            database=(os.getenv("DB_NAME") or "").strip() or None,
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///" + str(get_db_dir() / "voxquery.db")


@lru_cache(maxsize=None)
def get_engine(db_url: str) -> Engine:
    """Build an engine that opens a new DBAPI connection for every checkout.

    ``NullPool`` keeps no idle connections around, so closing a connection
    really closes it.
    """

    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(db_url, poolclass=NullPool, connect_args=connect_args, echo=False)

    if os.getenv("VOXQUERY_SQL_TRACE"):
        @event.listens_for(engine, "before_cursor_execute")
        def _trace(conn, cursor, statement, parameters, context, executemany):
            logger.info(statement)

    return engine


@contextmanager
def get_connection(db_url: str | None = None) -> Iterator[Connection]:
    """Open a dedicated connection and always release it.

    Parameters
    ----------
    db_url:
        Optional SQLAlchemy URL. When ``None`` :func:`get_db_url` is used.
    """

    engine = get_engine(db_url or get_db_url())
    connection = engine.connect()
    try:
        yield connection
    finally:
        connection.close()
