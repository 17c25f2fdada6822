"""
Purchase intake.

Received goods are matched to the catalog by (name, batch). A known row is
topped up by quantity + free quantity and takes the purchase line's prices,
expiry and tax rates (the latest purchase wins); an unknown key becomes a
new product.
"""
import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from billing.calculator import calculate_purchase_totals, to_decimal
from products.models import Product, inclusive_rate
from .models import PurchaseBill, PurchaseBillItem, Supplier

logger = logging.getLogger(__name__)


def _master_fields(item):
    cgst = to_decimal(item.get('cgst'))
    sgst = to_decimal(item.get('sgst'))
    igst = to_decimal(item.get('igst'))
    if igst and not (cgst or sgst):
        # Counter sales are intra-state: split IGST evenly
        cgst = sgst = igst / 2
    sale_rate = to_decimal(item.get('sale_rate'))
    sale_rate_inclusive = item.get('sale_rate_inclusive')
    fields = {
        'mrp': to_decimal(item.get('mrp')),
        'purchase_rate': to_decimal(item.get('purchase_rate')),
        'sale_rate': sale_rate,
        'sale_rate_inclusive': (
            to_decimal(sale_rate_inclusive) if sale_rate_inclusive is not None
            else inclusive_rate(sale_rate, cgst, sgst)
        ),
        'expiry': item.get('expiry') or '',
        'cgst': cgst,
        'sgst': sgst,
    }
    for optional in ('hsn', 'packaging'):
        if item.get(optional):
            fields[optional] = item[optional]
    return fields


def receive_into_stock(item, fields):
    """Insert or top up the catalog row for one purchase line."""
    name = item['product_name']
    batch = item.get('batch') or ''
    received = int(item.get('quantity') or 0) + int(item.get('free_quantity') or 0)

    product = Product.objects.select_for_update().filter(name=name, batch=batch).first()
    if product is None:
        product = Product.objects.create(name=name, batch=batch, quantity=received, **fields)
        logger.info('Purchase created product %s (%s / %s) with %d units', product.id, name, batch, received)
        return product
    Product.objects.filter(pk=product.pk).update(quantity=F('quantity') + received, **fields)
    logger.info('Purchase added %d units to product %s', received, product.id)
    return product


def create_purchase(data):
    items = data['items']
    overall = to_decimal(data.get('overall_discount_percent'))
    totals = calculate_purchase_totals(items, overall)

    with transaction.atomic():
        supplier, _ = Supplier.objects.get_or_create(name=data['supplier_name'].strip())
        purchase = PurchaseBill.objects.create(
            supplier=supplier,
            supplier_name=supplier.name,
            bill_number=data.get('bill_number') or '',
            bill_date=data.get('bill_date') or timezone.localdate(),
            tax_type=data.get('tax_type') or 'Intra-State',
            total_pre_tax=totals.total_pre_tax,
            overall_discount_percent=overall,
            overall_discount_amount=totals.overall_discount_amount,
            taxable_amount=totals.taxable_amount,
            total_gst_amount=totals.total_gst_amount,
            rounding=totals.rounding,
            grand_total=totals.grand_total,
        )
        for item, amount in zip(items, totals.line_amounts):
            fields = _master_fields(item)
            product = receive_into_stock(item, fields)
            PurchaseBillItem.objects.create(
                purchase_bill=purchase,
                product=product,
                product_name=item['product_name'],
                hsn=item.get('hsn') or '',
                batch=item.get('batch') or '',
                packaging=item.get('packaging') or '',
                quantity=int(item.get('quantity') or 0),
                free_quantity=int(item.get('free_quantity') or 0),
                mrp=fields['mrp'],
                purchase_rate=fields['purchase_rate'],
                sale_rate=fields['sale_rate'],
                sale_rate_inclusive=fields['sale_rate_inclusive'],
                discount=to_decimal(item.get('discount')),
                expiry=fields['expiry'],
                cgst=to_decimal(item.get('cgst')),
                sgst=to_decimal(item.get('sgst')),
                igst=to_decimal(item.get('igst')),
                amount=amount,
            )

    logger.info('Purchase %s from %s recorded (%d lines, total %s)',
                purchase.id, purchase.supplier_name, len(items), totals.grand_total)
    return purchase
