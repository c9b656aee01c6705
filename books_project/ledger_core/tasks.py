import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def refresh_ledger_balances(company_id):
    """
    Rewrite the informational Ledger.current_balance cache from the entry stream.
    Idempotent; entries are never touched.
    """
    # import models lazily to avoid circular imports at module import time
    from .models import Company, Ledger
    from .services.statement import build_statement

    company = Company.objects.get(pk=company_id)
    updated = 0
    for ledger in Ledger.objects.for_company(company).only("pk", "current_balance"):
        closing = build_statement(company, ledger.pk).closing_balance
        if closing != ledger.current_balance:
            # update() skips full_clean(); only the cache column changes
            Ledger.objects.filter(pk=ledger.pk).update(current_balance=closing)
            updated += 1

    logger.info("Refreshed %d ledger balances for company %s", updated, company_id)
    return updated


@shared_task
def rebuild_item_quantities(company_id):
    """Re-project Item.current_quantity from the StockMovement log."""
    from .models import Item
    from .services.inventory import rebuild_item_quantity

    count = 0
    for item in Item.objects.filter(company_id=company_id):
        rebuild_item_quantity(item)
        count += 1

    logger.info("Rebuilt quantities for %d items of company %s", count, company_id)
    return count
