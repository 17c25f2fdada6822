"""
Bill arithmetic.

Every line carries its own discount; the bill-level discount is applied on
top of what is left after the line discount, so the two compound. Tax is
charged on the amount left after both discounts.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, NamedTuple

ZERO = Decimal('0')
HUNDRED = Decimal('100')
CENT = Decimal('0.01')


def to_decimal(value):
    """Missing, malformed and non-finite values all count as zero."""
    if value is None or value == '' or isinstance(value, bool):
        return ZERO
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not number.is_finite():
        return ZERO
    return number


def to_money(value):
    """Round to paise, half up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _field(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


class LineAmounts(NamedTuple):
    subtotal: Decimal
    discount: Decimal
    taxable: Decimal
    cgst: Decimal
    sgst: Decimal


class BillTotals(NamedTuple):
    subtotal: Decimal
    total_discount: Decimal
    total_cgst: Decimal
    total_sgst: Decimal
    grand_total: Decimal


def line_amounts(item, overall_discount_percent=0):
    rate = to_decimal(_field(item, 'rate'))
    quantity = to_decimal(_field(item, 'quantity'))
    discount = to_decimal(_field(item, 'discount'))
    overall = to_decimal(overall_discount_percent)

    subtotal = rate * quantity
    item_discount = subtotal * (discount / HUNDRED)
    after_item = subtotal - item_discount
    overall_discount = after_item * (overall / HUNDRED)
    taxable = after_item - overall_discount
    return LineAmounts(
        subtotal=subtotal,
        discount=item_discount + overall_discount,
        taxable=taxable,
        cgst=taxable * (to_decimal(_field(item, 'cgst')) / HUNDRED),
        sgst=taxable * (to_decimal(_field(item, 'sgst')) / HUNDRED),
    )


def calculate_totals(items, overall_discount_percent=0):
    subtotal = total_discount = total_cgst = total_sgst = ZERO
    for item in items:
        line = line_amounts(item, overall_discount_percent)
        subtotal += line.subtotal
        total_discount += line.discount
        total_cgst += line.cgst
        total_sgst += line.sgst
    return BillTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        total_cgst=total_cgst,
        total_sgst=total_sgst,
        grand_total=subtotal - total_discount + total_cgst + total_sgst,
    )


class PurchaseTotals(NamedTuple):
    line_amounts: List[Decimal]
    total_pre_tax: Decimal
    overall_discount_amount: Decimal
    taxable_amount: Decimal
    total_gst_amount: Decimal
    rounding: Decimal
    grand_total: Decimal


def purchase_line_amount(item):
    rate = to_decimal(_field(item, 'purchase_rate'))
    quantity = to_decimal(_field(item, 'quantity'))
    discount = to_decimal(_field(item, 'discount'))
    return rate * quantity * (1 - discount / HUNDRED)


def calculate_purchase_totals(items, overall_discount_percent=0):
    """
    Supplier invoice totals. Free quantity is never charged. IGST replaces
    CGST+SGST on a line whenever it is set. The grand total is rounded to
    the nearest rupee and the residue kept in ``rounding``.
    """
    overall = to_decimal(overall_discount_percent)
    amounts = []
    total_gst = ZERO
    for item in items:
        amount = purchase_line_amount(item)
        amounts.append(amount)
        igst = to_decimal(_field(item, 'igst'))
        rate = igst if igst else to_decimal(_field(item, 'cgst')) + to_decimal(_field(item, 'sgst'))
        total_gst += amount * (1 - overall / HUNDRED) * (rate / HUNDRED)

    total_pre_tax = sum(amounts, ZERO)
    overall_discount_amount = total_pre_tax * (overall / HUNDRED)
    taxable = total_pre_tax - overall_discount_amount
    exact = taxable + total_gst
    grand_total = exact.quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return PurchaseTotals(
        line_amounts=amounts,
        total_pre_tax=total_pre_tax,
        overall_discount_amount=overall_discount_amount,
        taxable_amount=taxable,
        total_gst_amount=total_gst,
        rounding=grand_total - exact,
        grand_total=grand_total,
    )
