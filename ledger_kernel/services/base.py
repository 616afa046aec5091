"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Common constructor for the write side.  Every service receives a
    LedgerContext and performs its writes inside ``ctx.unit_of_work()``,
    which decides whether anything is committed.

Architecture position:
    Kernel > Services -- imperative shell.

Invariants enforced:
    - Services never call ``session.commit()`` or ``session.rollback()``
      themselves; the context owns transaction boundaries.
"""

from abc import ABC

from sqlalchemy.orm import Session

from ledger_kernel.context import LedgerContext
from ledger_kernel.domain.clock import Clock


class BaseService(ABC):
    """
    Abstract base class for all kernel services.

    Non-goals:
        - Read-only queries belong in ``ledger_kernel/selectors/``.
    """

    def __init__(self, context: LedgerContext):
        self.context = context

    @property
    def session(self) -> Session:
        return self.context.session

    @property
    def clock(self) -> Clock:
        return self.context.clock
