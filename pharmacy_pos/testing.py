from django.conf import settings
from django.urls import reverse
from rest_framework.test import APITestCase


class LoggedInAPITestCase(APITestCase):
    """APITestCase whose client already holds a logged-in till session."""

    def setUp(self):
        super().setUp()
        response = self.client.post(
            reverse('login'),
            {'username': settings.POS_USERNAME, 'password': settings.POS_PASSWORD},
            format='json',
        )
        self.assertEqual(response.status_code, 200)
