from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.urls import reverse

from customers.models import Customer
from pharmacy_pos.testing import LoggedInAPITestCase
from products.models import Product
from . import services
from .calculator import calculate_purchase_totals, calculate_totals, line_amounts, to_decimal
from .models import Bill, BillItem
from .services import BillStateError


class CalculatorTests(SimpleTestCase):

    def test_line_and_overall_discount_compound(self):
        items = [{'rate': 100, 'quantity': 2, 'discount': 10, 'cgst': 6, 'sgst': 6}]
        totals = calculate_totals(items, overall_discount_percent=5)
        self.assertEqual(totals.subtotal, Decimal('200'))
        # 20 off the line, then 5% of the remaining 180
        self.assertEqual(totals.total_discount, Decimal('29'))
        self.assertEqual(totals.total_cgst, Decimal('10.26'))
        self.assertEqual(totals.total_sgst, Decimal('10.26'))
        self.assertEqual(totals.grand_total, Decimal('191.52'))

    def test_grand_total_is_the_sum_of_its_parts(self):
        items = [
            {'rate': '12.35', 'quantity': 3, 'discount': '7.5', 'cgst': '2.5', 'sgst': '2.5'},
            {'rate': '99.99', 'quantity': 1, 'discount': 0, 'cgst': 9, 'sgst': 9},
            {'rate': '0.33', 'quantity': 7, 'discount': 33, 'cgst': 0, 'sgst': 0},
        ]
        totals = calculate_totals(items, overall_discount_percent='3.3')
        self.assertEqual(
            totals.grand_total,
            totals.subtotal - totals.total_discount + totals.total_cgst + totals.total_sgst,
        )

    def test_missing_and_garbage_fields_count_as_zero(self):
        items = [{'rate': 'abc', 'quantity': 3}, {'quantity': None, 'rate': 10}, {}]
        totals = calculate_totals(items)
        self.assertEqual(totals.grand_total, Decimal('0'))
        self.assertEqual(to_decimal('NaN'), Decimal('0'))
        self.assertEqual(to_decimal(True), Decimal('0'))

    def test_input_is_not_mutated(self):
        items = [{'rate': 10, 'quantity': 1, 'discount': 5, 'cgst': 6, 'sgst': 6}]
        snapshot = [dict(item) for item in items]
        calculate_totals(items, 10)
        self.assertEqual(items, snapshot)

    def test_empty_bill(self):
        totals = calculate_totals([])
        self.assertEqual(totals.subtotal, Decimal('0'))
        self.assertEqual(totals.grand_total, Decimal('0'))

    def test_line_amounts_accepts_model_instances(self):
        item = BillItem(rate=Decimal('50'), quantity=2, discount=Decimal('10'), cgst=Decimal('6'), sgst=Decimal('6'))
        line = line_amounts(item)
        self.assertEqual(line.taxable, Decimal('90'))
        self.assertEqual(line.cgst, Decimal('5.4'))

    def test_purchase_totals_round_to_rupee(self):
        items = [{'purchase_rate': '10.25', 'quantity': 3, 'cgst': '2.5', 'sgst': '2.5'}]
        totals = calculate_purchase_totals(items)
        self.assertEqual(totals.total_pre_tax, Decimal('30.75'))
        self.assertEqual(totals.total_gst_amount, Decimal('1.5375'))
        self.assertEqual(totals.grand_total, Decimal('32'))
        self.assertEqual(totals.rounding, Decimal('-0.2875'))

    def test_purchase_igst_replaces_cgst_sgst(self):
        items = [{'purchase_rate': 100, 'quantity': 1, 'cgst': 6, 'sgst': 6, 'igst': 18}]
        totals = calculate_purchase_totals(items)
        self.assertEqual(totals.total_gst_amount, Decimal('18'))
        self.assertEqual(totals.grand_total, Decimal('118'))

    def test_purchase_overall_discount(self):
        items = [{'purchase_rate': 100, 'quantity': 2, 'discount': 10, 'cgst': 6, 'sgst': 6}]
        totals = calculate_purchase_totals(items, overall_discount_percent=10)
        self.assertEqual(totals.line_amounts, [Decimal('180')])
        self.assertEqual(totals.overall_discount_amount, Decimal('18'))
        self.assertEqual(totals.taxable_amount, Decimal('162'))
        self.assertEqual(totals.total_gst_amount, Decimal('19.44'))
        self.assertEqual(totals.grand_total, Decimal('181'))


def sale_line(product, quantity, **extra):
    line = {
        'product_id': product.id,
        'product_name': product.name,
        'batch': product.batch,
        'rate': 10,
        'quantity': quantity,
        'discount': 0,
        'cgst': 6,
        'sgst': 6,
    }
    line.update(extra)
    return line


class BillServiceTests(TestCase):

    def setUp(self):
        self.product = Product.objects.create(name='Paracetamol 500', batch='PC01', quantity=20, sale_rate=10)

    def stock(self):
        self.product.refresh_from_db()
        return self.product.quantity

    def test_completed_sale_takes_stock(self):
        services.create_bill({'items': [sale_line(self.product, 5)]})
        self.assertEqual(self.stock(), 15)

    def test_editing_moves_only_the_difference(self):
        bill = services.create_bill({'items': [sale_line(self.product, 5)]})
        services.update_bill(bill.id, {'items': [sale_line(self.product, 3)]})
        self.assertEqual(self.stock(), 17)
        services.update_bill(bill.id, {'items': [sale_line(self.product, 3)]})
        self.assertEqual(self.stock(), 17)

    def test_stock_never_goes_negative(self):
        bill = services.create_bill({'items': [sale_line(self.product, 5)]})
        services.update_bill(bill.id, {'items': [sale_line(self.product, 40)]})
        self.assertEqual(self.stock(), 0)

    def test_held_sale_leaves_stock_alone(self):
        services.create_bill({'status': Bill.HELD, 'items': [sale_line(self.product, 5)]})
        self.assertEqual(self.stock(), 20)

    def test_held_to_completed_applies_full_quantity(self):
        bill = services.create_bill({'status': Bill.HELD, 'items': [sale_line(self.product, 5)]})
        services.update_bill(bill.id, {'status': Bill.COMPLETED, 'items': [sale_line(self.product, 6)]})
        self.assertEqual(self.stock(), 14)

    def test_completed_to_held_returns_stock(self):
        bill = services.create_bill({'items': [sale_line(self.product, 5)]})
        services.update_bill(bill.id, {'status': Bill.HELD})
        self.assertEqual(self.stock(), 20)
        services.update_bill(bill.id, {'status': Bill.COMPLETED})
        self.assertEqual(self.stock(), 15)

    def test_free_text_lines_do_not_touch_stock(self):
        bill = services.create_bill({'items': [{'product_name': 'Cotton roll', 'rate': 25, 'quantity': 2}]})
        self.assertEqual(self.stock(), 20)
        self.assertEqual(bill.items.get().product_id, None)

    def test_deleting_held_bill_never_moves_stock(self):
        bill = services.create_bill({'status': Bill.HELD, 'items': [sale_line(self.product, 5)]})
        services.delete_held_bill(bill.id)
        self.assertFalse(Bill.objects.filter(pk=bill.id).exists())
        self.assertEqual(self.stock(), 20)

    def test_completed_bill_cannot_be_deleted(self):
        bill = services.create_bill({'items': [sale_line(self.product, 5)]})
        with self.assertRaises(BillStateError):
            services.delete_held_bill(bill.id)
        self.assertTrue(Bill.objects.filter(pk=bill.id).exists())
        self.assertEqual(self.stock(), 15)

    def test_bill_number_uses_year_and_id(self):
        bill = services.create_bill({'items': []})
        self.assertEqual(bill.bill_number, f'INV-{bill.bill_date.year}-{bill.id:04d}')

    def test_totals_are_recomputed_server_side(self):
        bill = services.create_bill({'items': [sale_line(self.product, 2, discount=10)], 'overall_discount_percent': 0})
        bill.refresh_from_db()
        self.assertEqual(bill.subtotal, Decimal('20.00'))
        self.assertEqual(bill.total_discount, Decimal('2.00'))
        self.assertEqual(bill.grand_total, Decimal('20.16'))

    def test_customer_is_created_then_reused(self):
        first = services.create_bill({'patient_name': 'Asha', 'patient_mobile': '9800000001', 'items': []})
        second = services.create_bill({
            'patient_name': 'Asha K', 'patient_mobile': '9800000001', 'doctor_name': 'Dr. Rao', 'items': [],
        })
        self.assertEqual(first.customer_id, second.customer_id)
        customer = Customer.objects.get(mobile='9800000001')
        self.assertEqual(customer.name, 'Asha K')
        self.assertEqual(customer.doctor_name, 'Dr. Rao')

    def test_walk_in_sale_has_no_customer(self):
        bill = services.create_bill({'patient_name': 'Walk-in', 'items': []})
        self.assertIsNone(bill.customer_id)
        self.assertEqual(Customer.objects.count(), 0)


class BillApiTests(LoggedInAPITestCase):

    def setUp(self):
        super().setUp()
        self.product = Product.objects.create(name='Cetirizine', batch='CT9', quantity=20)

    def test_create_bill_accepts_camel_case_and_recomputes_totals(self):
        response = self.client.post(reverse('bill-list'), {
            'patientName': 'Ravi',
            'patientMobile': '9811111111',
            'grandTotal': 1,
            'items': [{'productId': self.product.id, 'productName': 'Cetirizine', 'rate': 50, 'quantity': 2,
                       'cgst': 6, 'sgst': 6}],
        }, format='json')
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['patient_name'], 'Ravi')
        self.assertAlmostEqual(body['grand_total'], 112.0)
        self.assertTrue(body['bill_number'].startswith('INV-'))
        self.assertEqual(len(body['items']), 1)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 18)

    def test_unknown_product_is_rejected(self):
        response = self.client.post(reverse('bill-list'), {
            'items': [{'product_id': 999999, 'rate': 1, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('999999', response.json()['error'])
        self.assertEqual(Bill.objects.count(), 0)

    def test_negative_quantity_is_rejected(self):
        response = self.client.post(reverse('bill-list'), {
            'items': [{'product_id': self.product.id, 'rate': 1, 'quantity': -3}],
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

    def test_list_shows_completed_and_held_bills_separately(self):
        services.create_bill({'items': [sale_line(self.product, 1)]})
        services.create_bill({'status': Bill.HELD, 'items': [sale_line(self.product, 1)]})

        completed = self.client.get(reverse('bill-list')).json()
        held = self.client.get(reverse('held_bill_list')).json()
        self.assertEqual([b['status'] for b in completed], [Bill.COMPLETED])
        self.assertEqual([b['status'] for b in held], [Bill.HELD])
        self.assertEqual(len(held[0]['items']), 1)

    def test_retrieve_and_update(self):
        bill = services.create_bill({'items': [sale_line(self.product, 5)]})
        detail = self.client.get(reverse('bill-detail', args=[bill.id])).json()
        self.assertEqual(detail['items'][0]['quantity'], 5)

        response = self.client.put(reverse('bill-detail', args=[bill.id]), {
            'items': [sale_line(self.product, 3)],
        }, format='json')
        self.assertEqual(response.status_code, 200)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 17)

    def test_missing_bill_is_404(self):
        self.assertEqual(self.client.get(reverse('bill-detail', args=[4242])).status_code, 404)
        response = self.client.put(reverse('bill-detail', args=[4242]), {'items': []}, format='json')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'Bill not found')

    def test_delete_only_held_bills(self):
        held = services.create_bill({'status': Bill.HELD, 'items': []})
        done = services.create_bill({'items': []})

        self.assertEqual(self.client.delete(reverse('bill-detail', args=[held.id])).status_code, 200)
        response = self.client.delete(reverse('bill-detail', args=[done.id]))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'Held bill not found')
        self.assertTrue(Bill.objects.filter(pk=done.id).exists())

    def test_saved_totals_add_up_to_grand_total(self):
        response = self.client.post(reverse('bill-list'), {
            'items': [{'rate': 1, 'quantity': 1, 'cgst': 2.5, 'sgst': 2.5}],
        }, format='json')
        body = response.json()
        self.assertEqual(Decimal(str(body['total_cgst'])), Decimal('0.03'))
        self.assertEqual(Decimal(str(body['grand_total'])), Decimal('1.06'))

        for rate, discount, overall, gst in [(1, 0, 0, 6), (3.33, 7.5, 2.5, 2.5), (12.99, 10, 5, 9), (0.07, 33, 1, 14)]:
            with self.subTest(rate=rate, discount=discount, overall=overall, gst=gst):
                response = self.client.post(reverse('bill-list'), {
                    'overallDiscountPercent': overall,
                    'items': [{'rate': rate, 'quantity': 3, 'discount': discount, 'cgst': gst, 'sgst': gst}],
                }, format='json')
                self.assertEqual(response.status_code, 201)
                body = {k: Decimal(str(v)) for k, v in response.json().items()
                        if k in ('subtotal', 'total_discount', 'total_cgst', 'total_sgst', 'grand_total')}
                self.assertEqual(
                    body['grand_total'],
                    body['subtotal'] - body['total_discount'] + body['total_cgst'] + body['total_sgst'],
                )

    def test_oversized_quantity_is_rejected_before_saving(self):
        response = self.client.post(reverse('bill-list'), {
            'items': [{'product_id': self.product.id, 'rate': 1, 'quantity': 10 ** 20}],
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())
        self.assertEqual(Bill.objects.count(), 0)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 20)

    def test_oversized_rate_is_rejected_before_saving(self):
        response = self.client.post(reverse('bill-list'), {
            'items': [{'rate': 1e13, 'quantity': 1}],
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Bill.objects.count(), 0)

    def test_bill_total_beyond_column_size_is_rejected(self):
        response = self.client.post(reverse('bill-list'), {
            'items': [{'product_id': self.product.id, 'rate': 99999999, 'quantity': 1000}],
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Bill total is too large')
        self.assertEqual(Bill.objects.count(), 0)

    def test_oversized_edit_leaves_bill_untouched(self):
        bill = services.create_bill({'items': [sale_line(self.product, 5)]})
        response = self.client.put(reverse('bill-detail', args=[bill.id]), {
            'items': [sale_line(self.product, 2 ** 40)],
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 15)
