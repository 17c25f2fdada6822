from django.db import DatabaseError
from django.test import SimpleTestCase
from rest_framework import serializers
from rest_framework.exceptions import NotFound, ValidationError

from .exceptions import api_exception_handler
from .serializers import AliasedFieldsMixin, camel_to_snake, normalize_keys


class SampleSerializer(AliasedFieldsMixin, serializers.Serializer):
    patient_name = serializers.CharField()
    overall_discount_percent = serializers.FloatField(required=False)


class AliasTests(SimpleTestCase):

    def test_camel_to_snake(self):
        self.assertEqual(camel_to_snake('overallDiscountPercent'), 'overall_discount_percent')
        self.assertEqual(camel_to_snake('batch'), 'batch')

    def test_snake_case_wins_over_alias(self):
        data = normalize_keys({'patientName': 'camel', 'patient_name': 'snake'}, {'patient_name'})
        self.assertEqual(data['patient_name'], 'snake')

    def test_unknown_keys_pass_through(self):
        self.assertEqual(normalize_keys({'fooBar': 1}, {'patient_name'}), {'fooBar': 1})

    def test_serializer_accepts_both_spellings(self):
        for payload in ({'patientName': 'Ravi', 'overallDiscountPercent': 5},
                        {'patient_name': 'Ravi', 'overall_discount_percent': 5}):
            serializer = SampleSerializer(data=payload)
            self.assertTrue(serializer.is_valid(), serializer.errors)
            self.assertEqual(serializer.validated_data, {'patient_name': 'Ravi', 'overall_discount_percent': 5.0})


class ExceptionHandlerTests(SimpleTestCase):

    def test_field_errors_become_one_message(self):
        response = api_exception_handler(ValidationError({'quantity': ['Must be a number.']}), {})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'quantity: Must be a number.'})

    def test_non_field_errors_are_not_prefixed(self):
        response = api_exception_handler(ValidationError('Product with same name & batch already exists'), {})
        self.assertEqual(response.data, {'error': 'Product with same name & batch already exists'})

    def test_not_found(self):
        response = api_exception_handler(NotFound('Bill not found'), {})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {'error': 'Bill not found'})

    def test_database_errors_are_hidden(self):
        with self.assertLogs('pharmacy_pos.exceptions', level='ERROR'):
            response = api_exception_handler(DatabaseError('disk I/O error'), {})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {'error': 'Database error'})

    def test_other_errors_propagate(self):
        self.assertIsNone(api_exception_handler(RuntimeError('boom'), {}))
