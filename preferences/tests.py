from django.test import TestCase
from django.urls import reverse

from pharmacy_pos.testing import LoggedInAPITestCase
from .models import Setting


class SettingModelTests(TestCase):

    def test_threshold_falls_back_to_default(self):
        self.assertEqual(Setting.objects.low_stock_threshold(), 10)
        Setting.objects.create(setting_key=Setting.LOW_STOCK_THRESHOLD, setting_value='many')
        self.assertEqual(Setting.objects.low_stock_threshold(), 10)

    def test_values_are_stored_as_text(self):
        Setting.objects.save_many({'printHeader': True, 'gstin': '33ABCDE1234F1Z5', 'extra': {'a': 1}})
        stored = dict(Setting.objects.values_list('setting_key', 'setting_value'))
        self.assertEqual(stored, {'printHeader': 'true', 'gstin': '33ABCDE1234F1Z5', 'extra': '{"a": 1}'})


class SettingsApiTests(LoggedInAPITestCase):

    def test_saving_twice_keeps_one_row(self):
        for _ in range(2):
            response = self.client.post(reverse('settings'), {'lowStockThreshold': '5'}, format='json')
            self.assertEqual(response.status_code, 200)
        self.assertEqual(Setting.objects.filter(setting_key='lowStockThreshold').count(), 1)
        self.assertEqual(self.client.get(reverse('settings')).json(), {'lowStockThreshold': 5})
        self.assertEqual(Setting.objects.low_stock_threshold(), 5)

    def test_wrapped_settings_body(self):
        response = self.client.post(reverse('settings'), {
            'settings': {'shopName': 'City Medicals', 'lowStockThreshold': 15},
        }, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['settings'], {'shopName': 'City Medicals', 'lowStockThreshold': 15})

    def test_non_finite_threshold_is_returned_as_text(self):
        response = self.client.post(reverse('settings'), {'lowStockThreshold': 'inf'}, format='json')
        self.assertEqual(response.status_code, 200)
        response = self.client.get(reverse('settings'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'lowStockThreshold': 'inf'})
        self.assertEqual(Setting.objects.low_stock_threshold(), 10)

    def test_empty_body_is_rejected(self):
        response = self.client.post(reverse('settings'), {}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'No settings to save')
