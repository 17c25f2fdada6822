from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from pharmacy_pos.testing import LoggedInAPITestCase
from products.models import Product
from . import services
from .models import PurchaseBill, Supplier


def purchase_line(**overrides):
    line = {
        'product_name': 'Pantoprazole 40',
        'batch': 'PZ40A',
        'hsn': '3004',
        'quantity': 10,
        'free_quantity': 2,
        'mrp': 150,
        'purchase_rate': 90,
        'sale_rate': 120,
        'expiry': '2027-08',
        'cgst': 6,
        'sgst': 6,
    }
    line.update(overrides)
    return line


class ReceiveStockTests(TestCase):

    def test_new_product_gets_quantity_plus_free(self):
        services.create_purchase({'supplier_name': 'Medline', 'items': [purchase_line()]})
        product = Product.objects.get(name='Pantoprazole 40', batch='PZ40A')
        self.assertEqual(product.quantity, 12)
        self.assertEqual(product.sale_rate_inclusive, Decimal('134.40'))
        self.assertEqual(product.expiry, '2027-08')

    def test_known_product_is_topped_up_and_repriced(self):
        product = Product.objects.create(
            name='Pantoprazole 40', batch='PZ40A', quantity=5, mrp=140, purchase_rate=85, expiry='2026-12',
        )
        services.create_purchase({'supplier_name': 'Medline', 'items': [purchase_line()]})
        product.refresh_from_db()
        self.assertEqual(product.quantity, 17)
        self.assertEqual(product.mrp, Decimal('150'))
        self.assertEqual(product.purchase_rate, Decimal('90'))
        self.assertEqual(product.expiry, '2027-08')
        self.assertEqual(Product.objects.count(), 1)

    def test_new_batch_is_a_new_product(self):
        Product.objects.create(name='Pantoprazole 40', batch='OLD', quantity=5)
        services.create_purchase({'supplier_name': 'Medline', 'items': [purchase_line()]})
        self.assertEqual(Product.objects.filter(name='Pantoprazole 40').count(), 2)

    def test_igst_only_line_splits_into_cgst_and_sgst(self):
        services.create_purchase({
            'supplier_name': 'Northern Pharma',
            'tax_type': 'Inter-State',
            'items': [purchase_line(cgst=0, sgst=0, igst=18, sale_rate=100)],
        })
        product = Product.objects.get(batch='PZ40A')
        self.assertEqual(product.cgst, Decimal('9'))
        self.assertEqual(product.sgst, Decimal('9'))
        self.assertEqual(product.sale_rate_inclusive, Decimal('118.00'))

    def test_supplier_is_reused(self):
        services.create_purchase({'supplier_name': 'Medline', 'items': [purchase_line()]})
        services.create_purchase({'supplier_name': 'Medline ', 'items': [purchase_line(batch='PZ40B')]})
        self.assertEqual(Supplier.objects.count(), 1)
        self.assertEqual(PurchaseBill.objects.count(), 2)

    def test_grand_total_is_rounded_to_rupee(self):
        purchase = services.create_purchase({
            'supplier_name': 'Medline',
            'items': [purchase_line(purchase_rate='10.25', quantity=3, free_quantity=0, cgst='2.5', sgst='2.5')],
        })
        purchase.refresh_from_db()
        self.assertEqual(purchase.grand_total, Decimal('32'))
        self.assertEqual(purchase.total_pre_tax, Decimal('30.75'))
        self.assertEqual(purchase.rounding, Decimal('-0.29'))


class PurchaseApiTests(LoggedInAPITestCase):

    def test_save_purchase(self):
        response = self.client.post(reverse('purchase-list'), {
            'supplierName': 'Medline',
            'billNumber': 'ML-2231',
            'billDate': '2026-10-01',
            'items': [{
                'productName': 'Azee 500', 'batch': 'AZ5', 'quantity': 10, 'freeQuantity': 1,
                'purchaseRate': 50, 'saleRate': 70, 'cgst': 6, 'sgst': 6, 'expiry': '2028-01',
            }],
        }, format='json')
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['message'], 'Purchase saved')
        self.assertEqual(body['bill_number'], 'ML-2231')
        self.assertAlmostEqual(body['grand_total'], 560.0)
        self.assertEqual(body['items'][0]['free_quantity'], 1)
        self.assertEqual(Product.objects.get(name='Azee 500').quantity, 11)

        listed = self.client.get(reverse('purchase-list')).json()
        self.assertEqual(len(listed), 1)
        suppliers = self.client.get(reverse('supplier-list')).json()
        self.assertEqual([s['name'] for s in suppliers], ['Medline'])

    def test_supplier_and_items_are_required(self):
        response = self.client.post(reverse('purchase-list'), {'supplier_name': 'Medline', 'items': []}, format='json')
        self.assertEqual(response.status_code, 400)
        response = self.client.post(reverse('purchase-list'), {'items': [purchase_line()]}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(PurchaseBill.objects.count(), 0)

    def test_bad_line_saves_nothing(self):
        response = self.client.post(reverse('purchase-list'), {
            'supplier_name': 'Medline',
            'items': [purchase_line(), purchase_line(batch='X', expiry='2027/01')],
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Product.objects.count(), 0)

    def test_retrieve_purchase(self):
        purchase = services.create_purchase({'supplier_name': 'Medline', 'items': [purchase_line()]})
        response = self.client.get(reverse('purchase-detail', args=[purchase.id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['supplier_name'], 'Medline')

    def test_oversized_values_are_rejected_before_saving(self):
        for line in (purchase_line(quantity=10 ** 20), purchase_line(purchase_rate=1e13),
                     purchase_line(quantity=2000000000, free_quantity=2000000000),
                     purchase_line(purchase_rate=99999999, quantity=1000)):
            with self.subTest(line=line):
                response = self.client.post(reverse('purchase-list'), {
                    'supplier_name': 'Medline', 'items': [line],
                }, format='json')
                self.assertEqual(response.status_code, 400)
                self.assertIn('error', response.json())
        self.assertEqual(PurchaseBill.objects.count(), 0)
        self.assertEqual(Product.objects.count(), 0)
