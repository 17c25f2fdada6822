import datetime

from django.test import SimpleTestCase
from django.urls import reverse
from django.utils import timezone

from billing import services
from billing.models import Bill
from pharmacy_pos.testing import LoggedInAPITestCase
from products.models import Product
from purchases.services import create_purchase
from .queries import REPORTS, add_months


class AddMonthsTests(SimpleTestCase):

    def test_wraps_year(self):
        self.assertEqual(add_months(datetime.date(2026, 11, 30), 3), datetime.date(2027, 2, 1))
        self.assertEqual(add_months(datetime.date(2026, 1, 15), 0), datetime.date(2026, 1, 1))


class ReportApiTests(LoggedInAPITestCase):

    def setUp(self):
        super().setUp()
        self.product = Product.objects.create(
            name='Montair LC', batch='M1', hsn='3004', quantity=30, purchase_rate=8, sale_rate=10,
            cgst=6, sgst=6, expiry=timezone.localdate().strftime('%Y-%m'),
        )
        line = {'product_id': self.product.id, 'product_name': 'Montair LC', 'rate': 10, 'quantity': 4,
                'cgst': 6, 'sgst': 6}
        services.create_bill({'bill_date': datetime.date(2026, 5, 10), 'items': [line]})
        services.create_bill({'bill_date': datetime.date(2026, 5, 10), 'status': Bill.HELD, 'items': [line]})
        services.create_bill({'bill_date': datetime.date(2026, 6, 2), 'items': [dict(line, quantity=1)]})
        create_purchase({
            'supplier_name': 'Medline', 'bill_date': datetime.date(2026, 5, 1),
            'items': [{'product_name': 'Montair LC', 'batch': 'M1', 'quantity': 10, 'purchase_rate': 8,
                       'cgst': 6, 'sgst': 6, 'expiry': self.product.expiry}],
        })

    def report(self, report_type, **params):
        return self.client.get(reverse('reports'), {'type': report_type, **params})

    def test_every_report_type_answers(self):
        for report_type in REPORTS:
            with self.subTest(report_type=report_type):
                response = self.report(report_type)
                self.assertEqual(response.status_code, 200)
                self.assertIn('rows', response.json())

    def test_unknown_type(self):
        response = self.report('everything')
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.json())

    def test_sales_counts_completed_bills_in_range(self):
        body = self.report('sales', fromDate='2026-05-01', toDate='2026-05-31').json()
        self.assertEqual(body['from_date'], '2026-05-01')
        self.assertEqual(body['summary']['bill_count'], 1)
        self.assertAlmostEqual(body['summary']['grand_total'], 44.8)

        body = self.report('sales', from_date='2026-05-01').json()
        self.assertEqual(body['summary']['bill_count'], 2)

    def test_gst_groups_by_slab(self):
        rows = self.report('gst').json()['rows']
        self.assertEqual(len(rows), 1)
        self.assertAlmostEqual(rows[0]['taxable_value'], 50.0)
        self.assertAlmostEqual(rows[0]['total_tax'], 6.0)

    def test_movement(self):
        rows = self.report('movement').json()['rows']
        self.assertEqual(rows[0]['purchased'], 10)
        self.assertEqual(rows[0]['sold'], 5)
        self.assertEqual(rows[0]['closing_stock'], 35)

    def test_profitability(self):
        summary = self.report('profitability').json()['summary']
        self.assertAlmostEqual(summary['revenue'], 50.0)
        self.assertAlmostEqual(summary['cost'], 40.0)
        self.assertAlmostEqual(summary['profit'], 10.0)

    def test_expiry_includes_this_month(self):
        rows = self.report('expiry').json()['rows']
        self.assertEqual([r['name'] for r in rows], ['Montair LC'])

    def test_supplier_purchases(self):
        rows = self.report('supplier_purchases').json()['rows']
        self.assertEqual(rows[0]['supplier_name'], 'Medline')
        self.assertEqual(rows[0]['purchase_count'], 1)


class DashboardTests(LoggedInAPITestCase):

    def test_dashboard_stats(self):
        product = Product.objects.create(name='Zincovit', quantity=3)
        Product.objects.create(name='Becosules', quantity=300)
        line = {'product_id': product.id, 'rate': 100, 'quantity': 1}
        services.create_bill({'items': [line]})
        services.create_bill({'status': Bill.HELD, 'items': [line]})

        body = self.client.get(reverse('dashboard_stats')).json()
        self.assertAlmostEqual(body['today_sales'], 100.0)
        self.assertEqual(body['today_bill_count'], 1)
        self.assertEqual(body['held_bill_count'], 1)
        self.assertEqual(body['product_count'], 2)
        self.assertEqual(body['low_stock_count'], 1)
        self.assertEqual(body['low_stock_threshold'], 10)

    def test_current_ist_date(self):
        body = self.client.get(reverse('current_ist_date')).json()
        self.assertEqual(body['date'], timezone.localdate().isoformat())
        self.assertTrue(body['datetime'].endswith('+05:30'))
