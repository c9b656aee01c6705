from .actions import close_years, rebuild_quantities, reopen_years
from .auditlog import AuditLogAdmin
from .company import CompanyAdmin, GSTSettingsAdmin
from .inlines import InvoiceItemInline, PaymentInline, VoucherEntryInline
from .invoice import InvoiceAdmin, PaymentAdmin
from .item import ItemAdmin, StockMovementAdmin, UnitAdmin
from .ledger import LedgerAdmin, LedgerGroupAdmin
from .mixins import TenantAdminMixin
from .period import FinancialYearAdmin
from .voucher import VoucherAdmin, VoucherEntryAdmin, VoucherTypeAdmin
