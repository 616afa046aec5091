"""
Module: ledger_kernel.selectors.base
Responsibility: Abstract base class for read-only query selectors.
Architecture position: Kernel > Selectors.  May import from db/, models/ and
    domain/.  MUST NOT import from services/.

Invariants enforced:
    - Read-only access: selectors never add, delete, flush or commit.
    - Selectors return DTOs or Money, not ORM instances.
"""

from abc import ABC

from sqlalchemy.orm import Session

from ledger_kernel.context import LedgerContext


class BaseSelector(ABC):
    """Base class for all selectors; holds the caller's LedgerContext."""

    def __init__(self, context: LedgerContext):
        self.context = context

    @property
    def session(self) -> Session:
        return self.context.session
