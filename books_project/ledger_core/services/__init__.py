from .gst import GSTSplit, is_inter_state, split_gst
from .inventory import (STOCK_SIGN, apply_invoice_stock,
                        rebuild_item_quantity, reverse_invoice_stock)
from .invoicing import (ENTRY_SIDES, VOUCHER_TYPE_NAMES, create_invoice,
                        delete_invoice, update_invoice)
from .payment import delete_payment, record_payment
from .periods import (activate_financial_year, assert_period_open,
                      close_financial_year, create_financial_year,
                      delete_financial_year, is_locked,
                      reopen_financial_year)
from .statement import build_statement
from .vouchers import (delete_ledger, get_or_create_voucher_type,
                       post_voucher, replace_voucher, void_voucher)
