import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def money(value) -> Decimal:
    """Quantize to currency precision (2 dp, half-up)."""
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class GSTSplit:
    cgst_rate: Decimal
    cgst_amount: Decimal
    sgst_rate: Decimal
    sgst_amount: Decimal
    igst_rate: Decimal
    igst_amount: Decimal

    @property
    def total(self) -> Decimal:
        return self.cgst_amount + self.sgst_amount + self.igst_amount


def is_inter_state(company_state, party_state) -> bool:
    """
    IGST applies only when both states are known and differ.
    A blank state on either side falls back to intra-state.
    """
    company_state = (company_state or "").strip()
    party_state = (party_state or "").strip()
    if not company_state or not party_state:
        logger.warning(
            "State missing (company=%r, party=%r); treating as intra-state",
            company_state, party_state,
        )
        return False
    return company_state != party_state


def split_gst(taxable_amount, tax_rate, inter_state) -> GSTSplit:
    taxable_amount = Decimal(taxable_amount)
    tax_rate = Decimal(tax_rate or 0)

    if inter_state:
        split = GSTSplit(
            cgst_rate=ZERO,
            cgst_amount=ZERO,
            sgst_rate=ZERO,
            sgst_amount=ZERO,
            igst_rate=tax_rate,
            igst_amount=money(taxable_amount * tax_rate / 100),
        )
    else:
        half_rate = tax_rate / 2
        # both halves come from the same expression so they can't drift apart
        half_amount = money(taxable_amount * half_rate / 100)
        split = GSTSplit(
            cgst_rate=half_rate,
            cgst_amount=half_amount,
            sgst_rate=half_rate,
            sgst_amount=half_amount,
            igst_rate=ZERO,
            igst_amount=ZERO,
        )
    logger.debug("GST split %s @ %s%% inter_state=%s -> %s",
                 taxable_amount, tax_rate, inter_state, split)
    return split
