from django.db import transaction
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Setting


class SettingsView(APIView):
    """GET the whole key/value map; POST upserts every key sent."""

    def get(self, request):
        return Response(Setting.objects.as_dict())

    def post(self, request):
        values = request.data
        if isinstance(values, dict) and isinstance(values.get('settings'), dict):
            values = values['settings']
        if not isinstance(values, dict) or not values:
            return Response({'error': 'No settings to save'}, status=status.HTTP_400_BAD_REQUEST)
        with transaction.atomic():
            Setting.objects.save_many(values)
        return Response({'message': 'Settings saved', 'settings': Setting.objects.as_dict()})
