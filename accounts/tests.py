from django.test import override_settings
from django.urls import reverse
from rest_framework.test import APITestCase


@override_settings(POS_USERNAME='till', POS_PASSWORD='s3cret')
class LoginTests(APITestCase):

    def login(self, username='till', password='s3cret'):
        return self.client.post(reverse('login'), {'username': username, 'password': password}, format='json')

    def test_api_needs_a_session(self):
        response = self.client.get(reverse('product-list'))
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], '/')

    def test_index_is_open(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)

    def test_wrong_password(self):
        response = self.login(password='nope')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['error'], 'Invalid username or password')
        self.assertEqual(self.client.get(reverse('product-list')).status_code, 302)

    def test_missing_credentials(self):
        response = self.client.post(reverse('login'), {'username': 'till'}, format='json')
        self.assertEqual(response.status_code, 400)

    def test_login_then_logout(self):
        response = self.login()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'message': 'Login successful', 'username': 'till'})
        self.assertEqual(self.client.get(reverse('product-list')).status_code, 200)

        response = self.client.post(reverse('logout'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(reverse('product-list')).status_code, 302)

    def test_logout_beacon(self):
        self.login()
        response = self.client.post(reverse('logout_beacon'))
        self.assertEqual(response.status_code, 204)
        self.assertEqual(self.client.get(reverse('product-list')).status_code, 302)
