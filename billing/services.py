"""
Sale documents.

Each operation runs in one transaction: header, lines and stock move
together or not at all. Stock follows the bill's status. A Completed bill
holds its lines' quantities out of stock; a Held bill holds nothing.
"""
import logging
import uuid

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from customers.models import Customer
from products.stock import apply_stock_deltas, quantities_by_product, reconcile
from .calculator import calculate_totals, to_decimal, to_money
from .models import Bill, BillItem

logger = logging.getLogger(__name__)


class BillStateError(NotFound):
    default_detail = 'Held bill not found'


def _stock_lines(status, items):
    return items if status == Bill.COMPLETED else []


def _write_items(bill, items):
    BillItem.objects.bulk_create([
        BillItem(
            bill=bill,
            product_id=item.get('product_id') or None,
            product_name=item.get('product_name') or '',
            batch=item.get('batch') or '',
            mrp=to_decimal(item.get('mrp')),
            rate=to_decimal(item.get('rate')),
            quantity=int(item.get('quantity') or 0),
            expiry=item.get('expiry') or '',
            discount=to_decimal(item.get('discount')),
            cgst=to_decimal(item.get('cgst')),
            sgst=to_decimal(item.get('sgst')),
        )
        for item in items
    ])


def _set_totals(bill, totals):
    # Parts are rounded first; the grand total is their exact sum
    bill.subtotal = to_money(totals.subtotal)
    bill.total_discount = to_money(totals.total_discount)
    bill.total_cgst = to_money(totals.total_cgst)
    bill.total_sgst = to_money(totals.total_sgst)
    bill.grand_total = bill.subtotal - bill.total_discount + bill.total_cgst + bill.total_sgst


def create_bill(data):
    items = data.get('items') or []
    status = data.get('status') or Bill.COMPLETED
    overall = to_decimal(data.get('overall_discount_percent'))
    totals = calculate_totals(items, overall)

    with transaction.atomic():
        customer = Customer.objects.resolve(
            data.get('patient_mobile'), data.get('patient_name'), data.get('doctor_name')
        )
        bill = Bill(
            bill_number=f'TMP-{uuid.uuid4().hex}',
            bill_date=data.get('bill_date') or timezone.localdate(),
            patient_name=data.get('patient_name') or '',
            patient_mobile=data.get('patient_mobile') or '',
            doctor_name=data.get('doctor_name') or '',
            customer=customer,
            status=status,
            overall_discount_percent=overall,
        )
        _set_totals(bill, totals)
        bill.save()
        _write_items(bill, items)
        bill.assign_bill_number()
        bill.save(update_fields=['bill_number'])

        deltas = reconcile({}, quantities_by_product(_stock_lines(status, items)))
        apply_stock_deltas(deltas)

    logger.info('Bill %s created (%s, %d lines, total %s)', bill.bill_number, status, len(items), bill.grand_total)
    return bill


def update_bill(bill_id, data):
    """
    Rewrite a bill. Stock moves by the difference between what the bill held
    before and what it holds now, so repeated edits never double count.
    Omitting ``items`` keeps the current lines (e.g. a plain Held -> Completed).
    """
    with transaction.atomic():
        bill = Bill.objects.select_for_update().filter(pk=bill_id).first()
        if bill is None:
            raise NotFound('Bill not found')
        old_items = list(bill.items.all())
        replace_items = 'items' in data
        new_items = data['items'] if replace_items else old_items
        new_status = data.get('status') or bill.status
        overall = to_decimal(data.get('overall_discount_percent', bill.overall_discount_percent))

        deltas = reconcile(
            quantities_by_product(_stock_lines(bill.status, old_items)),
            quantities_by_product(_stock_lines(new_status, new_items)),
        )
        apply_stock_deltas(deltas)

        if replace_items:
            bill.items.all().delete()
            _write_items(bill, new_items)

        for field in ('patient_name', 'patient_mobile', 'doctor_name'):
            if data.get(field) is not None:
                setattr(bill, field, data[field])
        if data.get('bill_date'):
            bill.bill_date = data['bill_date']
        bill.customer = Customer.objects.resolve(bill.patient_mobile, bill.patient_name, bill.doctor_name)
        previous_status = bill.status
        bill.status = new_status
        bill.overall_discount_percent = overall
        _set_totals(bill, calculate_totals(new_items, overall))
        bill.save()

    logger.info('Bill %s updated (%s -> %s)', bill.bill_number, previous_status, new_status)
    return bill


def delete_held_bill(bill_id):
    """Only Held bills can be discarded; they never touched stock."""
    with transaction.atomic():
        deleted, _ = Bill.objects.filter(pk=bill_id, status=Bill.HELD).delete()
    if not deleted:
        raise BillStateError()
    logger.info('Held bill %s deleted', bill_id)
