from django.db import transaction
from django.test import TestCase
from django.urls import reverse

from billing import services
from billing.models import Bill
from pharmacy_pos.testing import LoggedInAPITestCase
from .models import Customer


class ResolveCustomerTests(TestCase):

    def test_blank_mobile_is_a_walk_in(self):
        with transaction.atomic():
            self.assertIsNone(Customer.objects.resolve('  ', 'Someone'))
        self.assertEqual(Customer.objects.count(), 0)

    def test_known_mobile_is_refreshed_in_place(self):
        original = Customer.objects.create(name='Meena', mobile='9000000001')
        with transaction.atomic():
            resolved = Customer.objects.resolve('9000000001', 'Meena S', 'Dr. Iyer')
        self.assertEqual(resolved.pk, original.pk)
        original.refresh_from_db()
        self.assertEqual(original.name, 'Meena S')
        self.assertEqual(original.doctor_name, 'Dr. Iyer')

    def test_blank_name_does_not_erase_existing(self):
        Customer.objects.create(name='Meena', mobile='9000000001', doctor_name='Dr. Iyer')
        with transaction.atomic():
            resolved = Customer.objects.resolve('9000000001', '', '')
        self.assertEqual(resolved.name, 'Meena')
        self.assertEqual(resolved.doctor_name, 'Dr. Iyer')


class CustomerApiTests(LoggedInAPITestCase):

    def add(self, **data):
        return self.client.post(reverse('customer-list'), data, format='json')

    def test_add_customer(self):
        response = self.add(name='Kiran', mobile='9123456780', doctorName='Dr. Shah')
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body['message'], 'Customer added')
        self.assertEqual(body['doctor_name'], 'Dr. Shah')

    def test_duplicate_mobile_returns_existing_customer(self):
        first = self.add(name='Kiran', mobile='9123456780').json()
        response = self.add(name='Somebody else', mobile='9123456780')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['message'], 'Customer already exists')
        self.assertEqual(body['id'], first['id'])
        self.assertEqual(body['name'], 'Kiran')
        self.assertEqual(Customer.objects.count(), 1)

    def test_name_and_mobile_are_required(self):
        self.assertEqual(self.add(mobile='9123456780').status_code, 400)
        self.assertEqual(self.add(name='Kiran').status_code, 400)

    def test_update_to_taken_mobile_is_rejected(self):
        self.add(name='Kiran', mobile='9123456780')
        other_id = self.add(name='Lata', mobile='9123456781').json()['id']
        response = self.client.put(reverse('customer-detail', args=[other_id]), {
            'name': 'Lata', 'mobile': '9123456780',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Another customer with this mobile number already exists.')

    def test_update(self):
        customer_id = self.add(name='Lata', mobile='9123456781').json()['id']
        response = self.client.put(reverse('customer-detail', args=[customer_id]), {
            'name': 'Lata M', 'mobile': '9123456789',
        }, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Customer.objects.get(pk=customer_id).mobile, '9123456789')

    def test_delete_keeps_bills(self):
        bill = services.create_bill({'patient_name': 'Lata', 'patient_mobile': '9123456781', 'items': []})
        response = self.client.delete(reverse('customer-detail', args=[bill.customer_id]))
        self.assertEqual(response.status_code, 200)
        bill.refresh_from_db()
        self.assertIsNone(bill.customer_id)
        self.assertEqual(bill.patient_mobile, '9123456781')

    def test_search_by_name_or_mobile(self):
        self.add(name='Kiran', mobile='9123456780')
        self.add(name='Lata', mobile='9988776655')

        def search(term):
            return [c['name'] for c in self.client.get(reverse('customer-search'), {'query': term}).json()]

        self.assertEqual(search('kir'), ['Kiran'])
        self.assertEqual(search('99887'), ['Lata'])

    def test_history_lists_bills_newest_first(self):
        first = services.create_bill({'patient_name': 'Kiran', 'patient_mobile': '9123456780', 'items': []})
        second = services.create_bill({
            'patient_name': 'Kiran', 'patient_mobile': '9123456780', 'status': Bill.HELD, 'items': [],
        })
        services.create_bill({'patient_name': 'Lata', 'patient_mobile': '9988776655', 'items': []})

        response = self.client.get(reverse('customer-history', args=[first.customer_id]))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['customer']['mobile'], '9123456780')
        self.assertEqual([b['id'] for b in body['bills']], [second.id, first.id])
