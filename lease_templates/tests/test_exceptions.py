"""
Tests for the error taxonomy and payload validation
"""
from django.test import SimpleTestCase
from rest_framework.exceptions import APIException

from lease_templates.exceptions import (
    ConcurrentModificationError,
    ConflictError,
    LeaseTemplateError,
    NotFound,
    PreconditionFailed,
    ValidationError,
)
from lease_templates.records import TemplateVariable
from lease_templates.serializers import TemplateVariableSerializer, validate_payload


class ErrorTaxonomyTests(SimpleTestCase):
    def test_status_codes_and_kinds(self):
        expected = [
            (NotFound, 404, 'not_found'),
            (ValidationError, 400, 'validation_error'),
            (ConflictError, 409, 'conflict'),
            (ConcurrentModificationError, 409, 'concurrent_modification'),
            (PreconditionFailed, 412, 'precondition_failed'),
        ]
        for error_class, status_code, kind in expected:
            with self.subTest(error=error_class.__name__):
                error = error_class('boom')
                self.assertIsInstance(error, LeaseTemplateError)
                self.assertIsInstance(error, APIException)
                self.assertEqual(error.status_code, status_code)
                self.assertEqual(error.kind, kind)

    def test_concurrent_modification_is_a_conflict(self):
        self.assertTrue(issubclass(ConcurrentModificationError, ConflictError))

    def test_to_dict(self):
        error = PreconditionFailed(
            'Missing required clauses: parties',
            fields=['parties'],
            extra={'missing_clauses': [{'id': 'c1', 'name': 'parties', 'title': 'Parties'}]},
        )
        self.assertEqual(error.to_dict(), {
            'kind': 'precondition_failed',
            'message': 'Missing required clauses: parties',
            'fields': ['parties'],
            'missing_clauses': [{'id': 'c1', 'name': 'parties', 'title': 'Parties'}],
        })

    def test_default_message(self):
        self.assertEqual(NotFound().to_dict()['message'], 'Resource not found.')


class ValidatePayloadTests(SimpleTestCase):
    def test_invalid_payload_lists_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_payload(TemplateVariableSerializer, {'name': '', 'type': 'colour'})
        self.assertEqual(ctx.exception.fields, ['label', 'name', 'type'])
        self.assertIn('type', ctx.exception.extra['errors'])

    def test_non_mapping_payload(self):
        with self.assertRaises(ValidationError):
            validate_payload(TemplateVariableSerializer, ['not', 'a', 'dict'])

    def test_valid_payload(self):
        data = validate_payload(TemplateVariableSerializer, {'name': 'rent', 'type': 'currency', 'label': 'Rent'})
        self.assertTrue(data['required'])
        self.assertEqual(TemplateVariable.from_dict(data).type, 'currency')

    def test_unknown_variable_type_on_record(self):
        with self.assertRaises(ValidationError):
            TemplateVariable(name='rent', type='colour')
