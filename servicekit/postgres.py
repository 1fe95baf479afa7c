"""Database connection with a bounded pool and connection retries."""

from __future__ import annotations

import logging
import time
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

DEFAULT_MAX_POOL_SIZE = 1
DEFAULT_CONN_ATTEMPTS = 10
DEFAULT_CONN_TIMEOUT = 1.0

log = logging.getLogger(__name__)


def _engine_options(url: URL, max_pool_size: int) -> dict[str, Any]:
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            # One shared connection keeps an in-memory database alive.
            return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        return {}
    return {"pool_size": max_pool_size, "max_overflow": 0}


class Postgres:
    """Holds a database engine, retrying the first connection until it succeeds.

    Raises ValueError for a URL that cannot be used and ConnectionError when
    every attempt has failed.
    """

    def __init__(
        self,
        url: str,
        max_pool_size: int = DEFAULT_MAX_POOL_SIZE,
        conn_attempts: int = DEFAULT_CONN_ATTEMPTS,
        conn_timeout: float = DEFAULT_CONN_TIMEOUT,
    ) -> None:
        if conn_attempts < 1:
            raise ValueError(f"connection attempts must be positive: {conn_attempts!r}")
        self.max_pool_size = max_pool_size
        self.conn_attempts = conn_attempts
        self.conn_timeout = conn_timeout

        try:
            parsed = make_url(url)
            engine = create_engine(parsed, **_engine_options(parsed, max_pool_size))
        except (ArgumentError, ImportError) as exc:
            raise ValueError(f"postgres - NewPostgres - ParseConfig: {exc}") from exc

        last_error: Exception | None = None
        while self.conn_attempts > 0:
            try:
                with engine.connect():
                    pass
            except SQLAlchemyError as exc:
                last_error = exc
                log.info("Postgres is trying to connect, attempts left: %d", self.conn_attempts)
                time.sleep(self.conn_timeout)
                self.conn_attempts -= 1
                continue
            self.engine: Engine = engine
            return

        engine.dispose()
        raise ConnectionError(
            f"postgres - NewPostgres - connAttempts == 0: {last_error}"
        ) from last_error

    def close(self) -> None:
        """Release every pooled connection."""
        self.engine.dispose()

    def __enter__(self) -> "Postgres":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()