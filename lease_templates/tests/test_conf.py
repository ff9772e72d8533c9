"""
Tests for store selection from settings
"""
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from lease_templates.conf import get_setting, get_store
from lease_templates.orm_store import DjangoLeaseStore
from lease_templates.storage import InMemoryLeaseStore


class GetStoreTests(SimpleTestCase):
    @override_settings(LEASE_TEMPLATES={'STORE': 'memory'})
    def test_memory_store(self):
        self.assertIsInstance(get_store(), InMemoryLeaseStore)

    @override_settings(LEASE_TEMPLATES={'STORE': 'orm'})
    def test_orm_store(self):
        self.assertIsInstance(get_store(), DjangoLeaseStore)

    @override_settings(LEASE_TEMPLATES={'STORE': 'redis'})
    def test_unknown_store(self):
        with self.assertRaises(ImproperlyConfigured):
            get_store()

    @override_settings(LEASE_TEMPLATES={})
    def test_defaults_fill_missing_keys(self):
        self.assertEqual(get_setting('STORE'), 'orm')
        self.assertTrue(get_setting('SEED_DEFAULT_CLAUSES'))
