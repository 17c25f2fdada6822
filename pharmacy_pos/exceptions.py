import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(data):
    """Dig the first human readable message out of a DRF error payload."""
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        for key, value in data.items():
            message = _first_message(value)
            if not message:
                continue
            if key in ('non_field_errors', 'error'):
                return message
            return f'{key}: {message}'
        return ''
    if isinstance(data, (list, tuple)):
        for value in data:
            message = _first_message(value)
            if message:
                return message
        return ''
    return str(data)


def api_exception_handler(exc, context):
    """Every error leaves the API as {"error": "..."}."""
    response = exception_handler(exc, context)
    if response is not None:
        response.data = {'error': _first_message(response.data) or 'Request failed'}
        return response

    if isinstance(exc, DatabaseError):
        view = context.get('view')
        logger.exception('Database error in %s', view.__class__.__name__ if view else 'unknown view')
        return Response({'error': 'Database error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return None
