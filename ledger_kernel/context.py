"""
LedgerContext -- explicit store handle passed to every service and selector.

Responsibility:
    Bundles the SQLAlchemy Session, the Clock and the commit policy that a
    group of services share, and provides ``unit_of_work()``, the
    scoped-transaction primitive the write side uses.

Architecture position:
    Kernel -- sits between db/ and services/ / selectors/.  Every service
    and selector constructor takes a LedgerContext; none reaches for a
    module-level session.

Two lifecycles:
    - Scoped: ``LedgerContext.scoped(session)`` wraps a caller-owned session.
      Units of work release their SAVEPOINT but never commit; the caller
      commits or rolls back the enclosing transaction.
    - Default: ``init_default_context(url)`` builds one process-wide context
      on its own session.  Each outermost unit of work commits on success.

Invariants enforced:
    - All writes of one unit of work land together or not at all: the block
      runs inside a SAVEPOINT that is rolled back on any exception.
    - Units of work on one context are serialized by a re-entrant lock, so
      two threads sharing a context cannot interleave a multi-step
      mutation.  Nested units of work on the same thread join the
      outermost one's lock.
    - Reads outside a unit of work take no lock.  A context shared between
      threads serves reads from one thread at a time, or the reader wraps
      its queries in ``unit_of_work()``.

Failure modes:
    - RuntimeError from get_default_context() before init_default_context().
    - Whatever the block raised, re-raised after the rollback.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from ledger_kernel.db.engine import create_tables, get_session, init_engine_from_url, reset_engine
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.logging_config import get_logger

logger = get_logger("context")


class LedgerContext:
    """
    Session + clock + commit policy shared by a set of services.

    Contract:
        Services open ``with ctx.unit_of_work():`` around every multi-step
        write.  Selectors only read ``ctx.session``.

    Threading:
        The session is not thread-safe.  Writes through services are
        serialized by the unit-of-work lock; selector and service reads use
        ``ctx.session`` directly and are not.  Give each thread its own
        context, or run a shared context's reads inside ``unit_of_work()``.

    Guarantees:
        - autocommit=False contexts never call ``session.commit()``.
        - autocommit=True contexts commit after each outermost unit of work.
    """

    def __init__(self, session: Session, clock: Clock | None = None, autocommit: bool = False):
        self.session = session
        self.clock = clock or SystemClock()
        self.autocommit = autocommit
        self._lock = threading.RLock()
        self._depth = 0

    @classmethod
    def scoped(cls, session: Session, clock: Clock | None = None) -> LedgerContext:
        """Context over a caller-owned session; the caller commits."""
        return cls(session, clock, autocommit=False)

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """
        Run the block as one atomic unit against the store.

        Yields the session.  On exception the SAVEPOINT is rolled back and
        the exception propagates; the enclosing transaction is left usable.
        """
        with self._lock:
            outermost = self._depth == 0
            self._depth += 1
            try:
                with self.session.begin_nested():
                    yield self.session
                if outermost and self.autocommit:
                    self.session.commit()
            except Exception:
                if outermost:
                    if self.autocommit:
                        self.session.rollback()
                    logger.warning("unit_of_work_rolled_back", exc_info=True)
                raise
            finally:
                self._depth -= 1

    def close(self) -> None:
        """Release the session."""
        self.session.close()


# ---------------------------------------------------------------------------
# Process-wide default context
# ---------------------------------------------------------------------------

_default_context: LedgerContext | None = None
_default_lock = threading.Lock()


def init_default_context(
    database_url: str = "sqlite://",
    *,
    echo: bool = False,
    clock: Clock | None = None,
) -> LedgerContext:
    """
    Create the process-wide context: engine, tables and one session.

    Calling it again replaces the previous default context.
    """
    global _default_context
    with _default_lock:
        if _default_context is not None:
            _default_context.close()
        init_engine_from_url(database_url, echo=echo)
        create_tables()
        _default_context = LedgerContext(get_session(), clock, autocommit=True)
    logger.info("default_context_initialized", extra={"autocommit": True})
    return _default_context


def get_default_context() -> LedgerContext:
    """
    The process-wide context.

    Raises:
        RuntimeError: If init_default_context() has not been called.
    """
    if _default_context is None:
        raise RuntimeError("Default context not initialized. Call init_default_context() first.")
    return _default_context


def reset_default_context() -> None:
    """Close the default context and dispose the engine. FOR TESTING ONLY."""
    global _default_context
    with _default_lock:
        if _default_context is not None:
            _default_context.close()
            _default_context = None
        reset_engine()
