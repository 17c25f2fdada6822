"""
Stock reconciliation.

A document (sale or purchase) is reduced to a map of product id -> quantity.
Moving a document from an old item set to a new one moves stock by
``old - new`` per product, so only the net change ever touches a product row.
"""
import logging
from collections import defaultdict

from django.db.models import F, Value
from django.db.models.functions import Greatest

from .models import Product

logger = logging.getLogger(__name__)


def _get(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def quantities_by_product(items):
    """Sum quantities per product id. Free-text lines (no product) are skipped."""
    totals = defaultdict(int)
    for item in items:
        product_id = _get(item, 'product_id')
        if not product_id:
            continue
        totals[int(product_id)] += int(_get(item, 'quantity') or 0)
    return dict(totals)


def reconcile(old, new):
    """Signed stock delta per product: positive returns stock, negative removes it."""
    deltas = {}
    for product_id in set(old) | set(new):
        delta = old.get(product_id, 0) - new.get(product_id, 0)
        if delta:
            deltas[product_id] = delta
    return deltas


def apply_stock_delta(product_id, delta):
    """Move one product's quantity by delta, never below zero."""
    Product.objects.filter(pk=product_id).update(
        quantity=Greatest(F('quantity') + delta, Value(0))
    )
    logger.info('Stock for product %s moved by %+d', product_id, delta)


def apply_stock_deltas(deltas):
    for product_id in sorted(deltas):
        apply_stock_delta(product_id, deltas[product_id])
