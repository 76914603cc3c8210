# Overview: Service-layer persistence helpers; scoped transactions, retries, and id minting.

from __future__ import annotations

import secrets
import string
import time
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def mint_id(prefix: str) -> str:
    """`<prefix>-<epoch ms>-<random suffix>`; the suffix separates same-millisecond writers."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def child_id(root_id: str, kind: str, position: int) -> str:
    """Deterministic dependent id; replacing dependents reuses the same ids."""
    return f"{root_id}-{kind}-{position}"


def execute(statement, params=None):
    """
    Run one statement on the request session.

    Statements that do not return rows are committed immediately; use
    transaction() whenever more than one write must land together.
    """
    session = db.session
    try:
        result = session.execute(statement, params or {})
        if not result.returns_rows:
            session.commit()
        return result
    except Exception:
        session.rollback()
        raise


@contextmanager
def transaction():
    """
    Scoped unit of work.

    Commits on normal exit. Any exception rolls back and propagates. The
    session is closed on every path so the pooled connection is returned.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a unit of work with retry on lock contention.

    Retries on OperationalError (deadlocks, lock timeouts) and StaleDataError.
    `func` must open its own transaction() so each attempt starts clean.
    """
    last_exc = None
    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError) as exc:
            db.session.rollback()
            last_exc = exc
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
    if last_exc:
        raise last_exc
