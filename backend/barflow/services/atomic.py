# Overview: Unit-of-work helper; every multi-write ledger operation commits or rolls back as one.

from __future__ import annotations

from typing import Callable, TypeVar

from ..extensions import db

T = TypeVar("T")


def run_atomic(func: Callable[[], T]) -> T:
    """
    Execute a ledger operation as a single commit boundary.

    The operation stages its writes on db.session (flush is fine, commit is
    not). On success the session is committed once; on any exception every
    staged write is rolled back and the exception propagates unchanged.
    No retry: the store has a single logical writer.
    """
    try:
        result = func()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return result
