from .auditlog import AuditLog
from .company import Company, GSTSettings
from .invoice import (Invoice, InvoiceItem, InvoiceType, Payment,
                      PaymentStatus, derive_payment_status)
from .item import Item, StockMovement, Unit
from .ledger import EntrySide, Ledger
from .ledger_group import DEBIT_NORMAL_GROUPS, GroupType, LedgerGroup
from .period import FinancialYear
from .voucher import Voucher, VoucherEntry, VoucherType
