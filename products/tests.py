from django.test import SimpleTestCase
from django.urls import reverse

from pharmacy_pos.testing import LoggedInAPITestCase
from .models import Product, StockAdjustment
from .stock import apply_stock_deltas, quantities_by_product, reconcile


class ReconcileTests(SimpleTestCase):

    def test_quantities_are_summed_per_product(self):
        items = [
            {'product_id': 1, 'quantity': 2},
            {'product_id': 1, 'quantity': 3},
            {'product_id': 2, 'quantity': 1},
            {'product_id': None, 'quantity': 9},
        ]
        self.assertEqual(quantities_by_product(items), {1: 5, 2: 1})

    def test_new_document_removes_stock(self):
        self.assertEqual(reconcile({}, {1: 5}), {1: -5})

    def test_removed_document_returns_stock(self):
        self.assertEqual(reconcile({1: 5, 2: 1}, {}), {1: 5, 2: 1})

    def test_unchanged_products_are_left_out(self):
        self.assertEqual(reconcile({1: 5, 2: 2}, {1: 3, 2: 2, 3: 1}), {1: 2, 3: -1})

    def test_no_change(self):
        self.assertEqual(reconcile({1: 4}, {1: 4}), {})


class ProductApiTests(LoggedInAPITestCase):

    def create_product(self, **overrides):
        data = {
            'name': 'Amoxicillin 250',
            'batch': 'AMX1',
            'hsn': '3004',
            'quantity': 40,
            'mrp': 120,
            'purchase_rate': 80,
            'sale_rate': 100,
            'cgst': 6,
            'sgst': 6,
            'expiry': '2027-03',
        }
        data.update(overrides)
        return self.client.post(reverse('product-list'), data, format='json')

    def test_create_computes_inclusive_rate(self):
        response = self.create_product()
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertAlmostEqual(body['sale_rate_inclusive'], 112.0)
        self.assertEqual(body['expiry'], '2027-03')

    def test_camel_case_fields_are_accepted(self):
        response = self.client.post(reverse('product-list'), {
            'name': 'ORS', 'saleRate': 20, 'purchaseRate': 15,
        }, format='json')
        self.assertEqual(response.status_code, 201)
        product = Product.objects.get(name='ORS')
        self.assertEqual(product.purchase_rate, 15)

    def test_duplicate_name_and_batch_is_rejected(self):
        self.create_product()
        response = self.create_product(quantity=1)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Product with same name & batch already exists')
        self.assertEqual(Product.objects.count(), 1)

    def test_same_name_different_batch_is_allowed(self):
        self.create_product()
        self.assertEqual(self.create_product(batch='AMX2').status_code, 201)

    def test_negative_quantity_is_stored_as_zero(self):
        response = self.create_product(quantity=-5)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['quantity'], 0)

    def test_oversized_quantity_is_rejected(self):
        response = self.create_product(quantity=10 ** 20)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Product.objects.count(), 0)

    def test_bad_expiry_format(self):
        response = self.create_product(expiry='03/2027')
        self.assertEqual(response.status_code, 400)
        self.assertIn('expiry', response.json()['error'])

    def test_update_changes_only_sent_fields(self):
        product_id = self.create_product().json()['id']
        response = self.client.put(reverse('product-detail', args=[product_id]), {'quantity': 7}, format='json')
        self.assertEqual(response.status_code, 200)
        product = Product.objects.get(pk=product_id)
        self.assertEqual(product.quantity, 7)
        self.assertEqual(product.batch, 'AMX1')

    def test_update_into_existing_name_and_batch(self):
        self.create_product()
        other_id = self.create_product(batch='AMX2').json()['id']
        response = self.client.put(reverse('product-detail', args=[other_id]), {'batch': 'AMX1'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_delete(self):
        product_id = self.create_product().json()['id']
        response = self.client.delete(reverse('product-detail', args=[product_id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], 'Product deleted')
        self.assertFalse(Product.objects.filter(pk=product_id).exists())

    def test_missing_product(self):
        response = self.client.get(reverse('product-detail', args=[99999]))
        self.assertEqual(response.status_code, 404)
        self.assertIn('error', response.json())

    def test_list_is_newest_first(self):
        self.create_product(name='First')
        self.create_product(name='Second')
        names = [p['name'] for p in self.client.get(reverse('product-list')).json()]
        self.assertEqual(names, ['Second', 'First'])

    def test_search_matches_name_batch_and_hsn(self):
        self.create_product(name='Dolo 650', batch='DL77', hsn='30049099')
        self.create_product(name='Azithral', batch='AZ1', hsn='1111')

        def search(term):
            response = self.client.get(reverse('product-search'), {'query': term})
            return [p['name'] for p in response.json()]

        self.assertEqual(search('dolo'), ['Dolo 650'])
        self.assertEqual(search('dl77'), ['Dolo 650'])
        self.assertEqual(search('3004'), ['Dolo 650'])
        self.assertEqual(len(search('')), 2)

    def test_search_is_capped(self):
        Product.objects.bulk_create([Product(name=f'Vitamin {n}', batch=str(n)) for n in range(60)])
        response = self.client.get(reverse('product-search'), {'query': 'vitamin'})
        self.assertEqual(len(response.json()), 50)


class StockAdjustmentTests(LoggedInAPITestCase):

    def setUp(self):
        super().setUp()
        self.product = Product.objects.create(name='Insulin', batch='IN1', quantity=10)

    def test_adjustment_moves_stock_and_is_logged(self):
        response = self.client.post(reverse('stock_adjustment_create'), {
            'productId': self.product.id, 'quantityAdjusted': -3, 'reason': 'Damaged',
        }, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['new_quantity'], 7)
        self.assertEqual(StockAdjustment.objects.get().quantity_adjusted, -3)

    def test_adjustment_cannot_push_stock_below_zero(self):
        self.client.post(reverse('stock_adjustment_create'), {
            'product_id': self.product.id, 'quantity_adjusted': -25, 'reason': 'Expired',
        }, format='json')
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 0)

    def test_zero_adjustment_is_rejected(self):
        response = self.client.post(reverse('stock_adjustment_create'), {
            'product_id': self.product.id, 'quantity_adjusted': 0, 'reason': 'Count',
        }, format='json')
        self.assertEqual(response.status_code, 400)

    def test_bulk_deltas_skip_missing_products(self):
        apply_stock_deltas({self.product.id: 5, 123456: -2})
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 15)

    def test_oversized_adjustment_is_rejected(self):
        response = self.client.post(reverse('stock_adjustment_create'), {
            'product_id': self.product.id, 'quantity_adjusted': 10 ** 20, 'reason': 'Count',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(StockAdjustment.objects.count(), 0)

    def test_adjustment_log_survives_product_deletion(self):
        self.client.post(reverse('stock_adjustment_create'), {
            'product_id': self.product.id, 'quantity_adjusted': 4, 'reason': 'Count',
        }, format='json')
        product_id = self.product.id
        response = self.client.delete(reverse('product-detail', args=[product_id]))
        self.assertEqual(response.status_code, 200)

        adjustment = StockAdjustment.objects.get()
        self.assertEqual(adjustment.product_id, product_id)
        self.assertEqual(adjustment.product_name, 'Insulin')
        self.assertEqual(adjustment.quantity_adjusted, 4)
