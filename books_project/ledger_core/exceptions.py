from django.core.exceptions import ValidationError as DjangoValidationError


class LedgerEngineError(Exception):
    """Base class for engine failures that are not input validation."""
    pass


class ValidationError(DjangoValidationError):
    """Raised for bad input: unbalanced vouchers, empty item lists, missing fields.

    Subclasses Django's ValidationError so model full_clean() failures
    and engine validation failures are handled by the same except clause.
    """
    pass


class UnbalancedVoucherError(ValidationError):
    """Raised when a Voucher fails double-entry balance check."""

    def __init__(self, debit, credit):
        self.debit = debit
        self.credit = credit
        super().__init__(
            f"Voucher is not balanced. Debit: {debit}, Credit: {credit}"
        )


class PeriodLockedError(LedgerEngineError):
    """Raised when a document date falls inside a closed financial year."""

    def __init__(self, company, date, message=None):
        self.company = company
        self.date = date
        super().__init__(
            message or f"{date} falls inside a closed financial period"
        )


class NotFoundError(LedgerEngineError):
    """Raised when a voucher / invoice / ledger / payment id does not resolve"""
    pass


class ConflictError(LedgerEngineError):
    """Raised when dependent records block an edit or delete"""
    pass
