"""Read-only report templates. Each takes an inclusive (start, end) date range; either end may be None."""
from collections import defaultdict
from decimal import Decimal

from django.db.models import Count, Sum
from django.utils import timezone

from billing.calculator import line_amounts
from billing.models import Bill, BillItem
from preferences.models import Setting
from products.models import Product, StockAdjustment
from purchases.models import PurchaseBill, PurchaseBillItem


def _money(value):
    return float(round(Decimal(value or 0), 2))


def _in_range(queryset, field, start_d, end_d):
    if start_d:
        queryset = queryset.filter(**{f'{field}__gte': start_d})
    if end_d:
        queryset = queryset.filter(**{f'{field}__lte': end_d})
    return queryset


def _completed_bills(start_d, end_d):
    return _in_range(Bill.objects.filter(status=Bill.COMPLETED), 'bill_date', start_d, end_d)


def _sold_items(start_d, end_d):
    return BillItem.objects.filter(bill__in=_completed_bills(start_d, end_d)).select_related('bill', 'product')


def sales_report(start_d, end_d):
    bills = _completed_bills(start_d, end_d).order_by('bill_date', 'id')
    rows = [
        {
            'id': b.id,
            'bill_number': b.bill_number,
            'bill_date': str(b.bill_date),
            'patient_name': b.patient_name,
            'patient_mobile': b.patient_mobile,
            'subtotal': _money(b.subtotal),
            'total_discount': _money(b.total_discount),
            'total_cgst': _money(b.total_cgst),
            'total_sgst': _money(b.total_sgst),
            'grand_total': _money(b.grand_total),
        }
        for b in bills
    ]
    agg = bills.aggregate(
        subtotal=Sum('subtotal'), total_discount=Sum('total_discount'),
        total_cgst=Sum('total_cgst'), total_sgst=Sum('total_sgst'), grand_total=Sum('grand_total'),
    )
    summary = {key: _money(value) for key, value in agg.items()}
    summary['bill_count'] = len(rows)
    return {'rows': rows, 'summary': summary}


def gst_report(start_d, end_d):
    """Taxable value and tax collected per (CGST%, SGST%) slab."""
    slabs = defaultdict(lambda: {'taxable': Decimal('0'), 'cgst_amount': Decimal('0'), 'sgst_amount': Decimal('0')})
    for item in _sold_items(start_d, end_d):
        line = line_amounts(item, item.bill.overall_discount_percent)
        slab = slabs[(item.cgst, item.sgst)]
        slab['taxable'] += line.taxable
        slab['cgst_amount'] += line.cgst
        slab['sgst_amount'] += line.sgst
    rows = [
        {
            'cgst_rate': float(cgst),
            'sgst_rate': float(sgst),
            'taxable_value': _money(data['taxable']),
            'cgst_amount': _money(data['cgst_amount']),
            'sgst_amount': _money(data['sgst_amount']),
            'total_tax': _money(data['cgst_amount'] + data['sgst_amount']),
        }
        for (cgst, sgst), data in sorted(slabs.items())
    ]
    return {'rows': rows}


def inventory_report(start_d, end_d):
    threshold = Setting.objects.low_stock_threshold()
    rows = []
    total_value = Decimal('0')
    for p in Product.objects.order_by('name', 'batch'):
        value = p.quantity * p.purchase_rate
        total_value += value
        rows.append({
            'product_id': p.id,
            'name': p.name,
            'batch': p.batch,
            'hsn': p.hsn,
            'expiry': p.expiry,
            'quantity': p.quantity,
            'purchase_rate': float(p.purchase_rate),
            'sale_rate': float(p.sale_rate),
            'stock_value': _money(value),
            'low_stock': p.quantity <= threshold,
        })
    return {'rows': rows, 'summary': {'product_count': len(rows), 'total_stock_value': _money(total_value)}}


def purchases_report(start_d, end_d):
    purchases = _in_range(PurchaseBill.objects.all(), 'bill_date', start_d, end_d).order_by('bill_date', 'id')
    rows = [
        {
            'id': p.id,
            'supplier_name': p.supplier_name,
            'bill_number': p.bill_number,
            'bill_date': str(p.bill_date),
            'taxable_amount': _money(p.taxable_amount),
            'total_gst_amount': _money(p.total_gst_amount),
            'grand_total': _money(p.grand_total),
        }
        for p in purchases
    ]
    total = purchases.aggregate(total=Sum('grand_total'))['total']
    return {'rows': rows, 'summary': {'purchase_count': len(rows), 'grand_total': _money(total)}}


def supplier_purchases_report(start_d, end_d):
    purchases = _in_range(PurchaseBill.objects.all(), 'bill_date', start_d, end_d)
    grouped = purchases.values('supplier_name').annotate(
        purchase_count=Count('id'),
        taxable_amount=Sum('taxable_amount'),
        total_gst_amount=Sum('total_gst_amount'),
        grand_total=Sum('grand_total'),
    ).order_by('-grand_total')
    rows = [
        {
            'supplier_name': r['supplier_name'],
            'purchase_count': r['purchase_count'],
            'taxable_amount': _money(r['taxable_amount']),
            'total_gst_amount': _money(r['total_gst_amount']),
            'grand_total': _money(r['grand_total']),
        }
        for r in grouped
    ]
    return {'rows': rows}


def add_months(day, months):
    month_index = day.month - 1 + months
    return day.replace(year=day.year + month_index // 12, month=month_index % 12 + 1, day=1)


def expiry_report(start_d, end_d):
    """In-stock products whose YYYY-MM expiry falls inside the range (default: the next three months)."""
    today = timezone.localdate()
    start = (start_d or today).strftime('%Y-%m')
    end = (end_d or add_months(today, 3)).strftime('%Y-%m')
    products = Product.objects.filter(quantity__gt=0, expiry__gte=start, expiry__lte=end).exclude(expiry='')
    rows = [
        {
            'product_id': p.id,
            'name': p.name,
            'batch': p.batch,
            'expiry': p.expiry,
            'quantity': p.quantity,
            'stock_value': _money(p.quantity * p.purchase_rate),
        }
        for p in products.order_by('expiry', 'name')
    ]
    return {'rows': rows}


def profitability_report(start_d, end_d):
    """Revenue is the taxable sale value; cost is today's purchase rate of the catalog row."""
    by_product = defaultdict(lambda: {'name': None, 'quantity': 0, 'revenue': Decimal('0'), 'cost': Decimal('0')})
    for item in _sold_items(start_d, end_d).exclude(product__isnull=True):
        data = by_product[item.product_id]
        data['name'] = item.product.name
        data['quantity'] += item.quantity
        data['revenue'] += line_amounts(item, item.bill.overall_discount_percent).taxable
        data['cost'] += item.quantity * item.product.purchase_rate
    rows = [
        {
            'product_id': pid,
            'name': data['name'],
            'quantity_sold': data['quantity'],
            'revenue': _money(data['revenue']),
            'cost': _money(data['cost']),
            'profit': _money(data['revenue'] - data['cost']),
        }
        for pid, data in by_product.items()
    ]
    rows.sort(key=lambda r: -r['profit'])
    summary = {
        'revenue': _money(sum(d['revenue'] for d in by_product.values())),
        'cost': _money(sum(d['cost'] for d in by_product.values())),
    }
    summary['profit'] = round(summary['revenue'] - summary['cost'], 2)
    return {'rows': rows, 'summary': summary}


def movement_report(start_d, end_d):
    movement = defaultdict(lambda: {'purchased': 0, 'sold': 0, 'adjusted': 0})

    purchased = _in_range(PurchaseBillItem.objects.exclude(product__isnull=True), 'purchase_bill__bill_date', start_d, end_d)
    for r in purchased.values('product').annotate(qty=Sum('quantity'), free=Sum('free_quantity')):
        movement[r['product']]['purchased'] += (r['qty'] or 0) + (r['free'] or 0)

    sold = _sold_items(start_d, end_d).exclude(product__isnull=True)
    for r in sold.values('product').annotate(qty=Sum('quantity')):
        movement[r['product']]['sold'] += r['qty'] or 0

    adjusted = _in_range(StockAdjustment.objects.exclude(product__isnull=True), 'created_at__date', start_d, end_d)
    for r in adjusted.values('product').annotate(qty=Sum('quantity_adjusted')):
        movement[r['product']]['adjusted'] += r['qty'] or 0

    products = Product.objects.in_bulk(list(movement))
    rows = []
    for pid, data in movement.items():
        product = products.get(pid)
        if product is None:
            continue
        rows.append({
            'product_id': pid,
            'name': product.name,
            'batch': product.batch,
            'purchased': data['purchased'],
            'sold': data['sold'],
            'adjusted': data['adjusted'],
            'closing_stock': product.quantity,
        })
    rows.sort(key=lambda r: (r['name'], r['batch']))
    return {'rows': rows}


def hsn_sale_report(start_d, end_d):
    by_hsn = defaultdict(lambda: {'quantity': 0, 'taxable': Decimal('0'), 'cgst': Decimal('0'), 'sgst': Decimal('0')})
    for item in _sold_items(start_d, end_d):
        hsn = item.product.hsn if item.product_id else ''
        line = line_amounts(item, item.bill.overall_discount_percent)
        data = by_hsn[hsn]
        data['quantity'] += item.quantity
        data['taxable'] += line.taxable
        data['cgst'] += line.cgst
        data['sgst'] += line.sgst
    rows = [
        {
            'hsn': hsn or 'N/A',
            'quantity': data['quantity'],
            'taxable_value': _money(data['taxable']),
            'cgst_amount': _money(data['cgst']),
            'sgst_amount': _money(data['sgst']),
            'total_value': _money(data['taxable'] + data['cgst'] + data['sgst']),
        }
        for hsn, data in sorted(by_hsn.items())
    ]
    return {'rows': rows}


REPORTS = {
    'sales': sales_report,
    'gst': gst_report,
    'inventory': inventory_report,
    'purchases': purchases_report,
    'supplier_purchases': supplier_purchases_report,
    'expiry': expiry_report,
    'profitability': profitability_report,
    'movement': movement_report,
    'hsn_sale': hsn_sale_report,
}
