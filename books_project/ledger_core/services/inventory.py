import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from ..models import InvoiceType, Item, StockMovement

logger = logging.getLogger(__name__)

# Sign applied per unit of quantity when a document is posted.
# Reversal uses the negated sign.
STOCK_SIGN = {
    InvoiceType.SALES: -1,
    InvoiceType.PURCHASE: 1,
    InvoiceType.CREDIT_NOTE: 1,
    InvoiceType.DEBIT_NOTE: -1,
}


def _move(invoice, lines, reason, direction):
    """
    Write one StockMovement per stock line and move Item.current_quantity by the same delta.
    `lines` are InvoiceItem rows (or anything with item_id & quantity).
    """
    sign = STOCK_SIGN[InvoiceType(invoice.invoice_type)] * direction
    deltas = {}
    for line in lines:
        if not line.item_id:
            continue  # service line, nothing to move
        deltas.setdefault(line.item_id, Decimal("0"))
        deltas[line.item_id] += Decimal(line.quantity) * sign

    if not deltas:
        return {}

    with transaction.atomic():
        # lock in pk order so two documents touching the same items can't deadlock
        items = Item.objects.select_for_update().filter(
            pk__in=deltas.keys(), company_id=invoice.company_id
        ).order_by("pk")
        for item in items:
            delta = deltas[item.pk]
            StockMovement.objects.create(
                company_id=invoice.company_id,
                item=item,
                invoice=invoice,
                document_type=invoice.invoice_type,
                document_number=invoice.invoice_number,
                quantity=delta,
                reason=reason,
            )
            item.current_quantity += delta
            # bypass full_clean(); only the quantity changes here
            Item.objects.filter(pk=item.pk).update(current_quantity=item.current_quantity)
            if item.current_quantity < 0:
                logger.warning("Item %s (%s) went negative: %s",
                               item.name, item.pk, item.current_quantity)
    return deltas


def apply_invoice_stock(invoice, lines=None):
    lines = invoice.items.all() if lines is None else lines
    return _move(invoice, lines, "apply", 1)


def reverse_invoice_stock(invoice, lines=None):
    """Undo apply_invoice_stock for the same lines and document type."""
    lines = invoice.items.all() if lines is None else lines
    return _move(invoice, lines, "reverse", -1)


def rebuild_item_quantity(item):
    """Re-project current_quantity = opening_quantity + Σ movements."""
    with transaction.atomic():
        item = Item.objects.select_for_update().get(pk=item.pk)
        moved = item.movements.aggregate(total=Sum("quantity"))["total"] or Decimal("0")
        quantity = item.opening_quantity + moved
        if quantity != item.current_quantity:
            logger.warning("Item %s quantity drifted: cached %s, rebuilt %s",
                           item.pk, item.current_quantity, quantity)
            Item.objects.filter(pk=item.pk).update(current_quantity=quantity)
            item.current_quantity = quantity
    return item
