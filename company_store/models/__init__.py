"""ORM models package."""
from .base import Base, CreatedAtMixin, TimestampMixin
from .credit_ledger import CreditLedgerEntry
from .employee import Company, Employee
from .profile import Profile
from .purchase import Purchase

__all__ = [
    "Base",
    "Company",
    "CreatedAtMixin",
    "CreditLedgerEntry",
    "Employee",
    "Profile",
    "Purchase",
    "TimestampMixin",
]
