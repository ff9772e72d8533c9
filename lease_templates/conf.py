"""
Engine settings and store wiring

Reads ``settings.LEASE_TEMPLATES``::

    LEASE_TEMPLATES = {
        'STORE': 'orm',              # or 'memory'
        'SEED_DEFAULT_CLAUSES': True,
    }
"""
from __future__ import annotations

from typing import Any, Dict

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .storage import InMemoryLeaseStore, LeaseStore

DEFAULTS: Dict[str, Any] = {
    'STORE': 'orm',
    'SEED_DEFAULT_CLAUSES': True,
}


def get_setting(name: str) -> Any:
    overrides = getattr(settings, 'LEASE_TEMPLATES', None) or {}
    return overrides.get(name, DEFAULTS[name])


def get_store() -> LeaseStore:
    backend = str(get_setting('STORE') or '').lower()
    if backend == 'orm':
        from .orm_store import DjangoLeaseStore
        return DjangoLeaseStore()
    if backend == 'memory':
        return InMemoryLeaseStore()
    raise ImproperlyConfigured(f"LEASE_TEMPLATES['STORE'] must be 'orm' or 'memory', got {backend!r}")
