import logging
from dataclasses import asdict, dataclass, field
from datetime import date as date_type
from decimal import Decimal
from typing import List, Optional

from ..exceptions import NotFoundError
from ..models import DEBIT_NORMAL_GROUPS, EntrySide, Ledger, VoucherEntry

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class StatementLine:
    entry_id: int
    voucher_id: int
    voucher_number: str
    voucher_type: str
    date: date_type
    narration: str
    debit: Decimal
    credit: Decimal
    balance: Decimal
    balance_type: str


@dataclass
class LedgerStatement:
    ledger_id: int
    ledger_name: str
    group_name: str
    group_type: str
    opening_balance: Decimal
    opening_balance_type: str
    closing_balance: Decimal
    closing_balance_type: str
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None
    transactions: List[StatementLine] = field(default_factory=list)

    def as_dict(self):
        return asdict(self)


def _balance_type(balance, opening_type):
    """Report the opening side while the running value is >= 0, the other side once it crosses zero."""
    if balance >= 0:
        return opening_type
    return EntrySide(opening_type).opposite.value


def build_statement(company, ledger_id, start_date=None, end_date=None) -> LedgerStatement:
    """
    Replay a ledger's entries in (voucher date, creation order) and fold a running balance.
    Asset/Expense ledgers grow on Dr, Liability/Income ledgers grow on Cr.
    Read-only: nothing stored is touched.
    """
    try:
        ledger = Ledger.objects.for_company(company).select_related("group").get(pk=ledger_id)
    except Ledger.DoesNotExist:
        raise NotFoundError(f"Ledger {ledger_id} not found")

    increasing_side = (
        EntrySide.DEBIT if ledger.group.group_type in DEBIT_NORMAL_GROUPS else EntrySide.CREDIT
    )
    opening_type = ledger.opening_balance_type

    entries = (
        VoucherEntry.objects.for_company(company)
        .for_ledger(ledger)
        .between(start_date, end_date)
        .chronological()
        .select_related("voucher", "voucher__voucher_type")
    )

    running = ledger.opening_balance or ZERO
    lines = []
    for entry in entries:
        if entry.entry_type == increasing_side:
            running += entry.amount
        else:
            running -= entry.amount

        voucher = entry.voucher
        lines.append(StatementLine(
            entry_id=entry.pk,
            voucher_id=voucher.pk,
            voucher_number=voucher.voucher_number,
            voucher_type=voucher.voucher_type.name,
            date=voucher.date,
            narration=voucher.narration,
            debit=entry.amount if entry.entry_type == EntrySide.DEBIT else ZERO,
            credit=entry.amount if entry.entry_type == EntrySide.CREDIT else ZERO,
            balance=running,
            balance_type=_balance_type(running, opening_type),
        ))

    logger.debug("Statement for ledger %s: %d entries, closing %s",
                 ledger.pk, len(lines), running)
    return LedgerStatement(
        ledger_id=ledger.pk,
        ledger_name=ledger.name,
        group_name=ledger.group.name,
        group_type=ledger.group.group_type,
        opening_balance=ledger.opening_balance,
        opening_balance_type=opening_type,
        closing_balance=running,
        closing_balance_type=_balance_type(running, opening_type),
        start_date=start_date,
        end_date=end_date,
        transactions=lines,
    )
